"""Helpers para tablas de solo lectura."""

from __future__ import annotations

from collections.abc import Sequence

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import QAbstractItemView, QHeaderView, QTableWidget, QTableWidgetItem, QWidget

SITUATION_COLORS: dict[str, str] = {
    "OK": "#16a34a",
    "COMPRAR": "#C80202",
}


def build_table(headers: Sequence[str], parent: QWidget | None = None) -> QTableWidget:
    """Construye una tabla de solo lectura con seleccion por fila."""
    table = QTableWidget(0, len(headers), parent)
    table.setHorizontalHeaderLabels(list(headers))
    table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
    table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
    table.setSelectionMode(QAbstractItemView.SelectionMode.SingleSelection)
    table.verticalHeader().setVisible(False)
    table.horizontalHeader().setSectionResizeMode(QHeaderView.ResizeMode.Stretch)
    table.setAlternatingRowColors(True)
    return table


def fill_table(table: QTableWidget, rows: Sequence[Sequence[str]]) -> None:
    """Reemplaza el contenido de la tabla; colorea columnas de situacion conocidas."""
    table.setRowCount(len(rows))
    for row_index, row in enumerate(rows):
        for column_index, value in enumerate(row):
            item = QTableWidgetItem(value)
            item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
            color = SITUATION_COLORS.get(value)
            if color is not None:
                item.setForeground(QColor(color))
            table.setItem(row_index, column_index, item)


def selected_row(table: QTableWidget) -> int | None:
    """Indice de la fila seleccionada o None."""
    indexes = table.selectionModel().selectedRows()
    if not indexes:
        return None
    return indexes[0].row()
