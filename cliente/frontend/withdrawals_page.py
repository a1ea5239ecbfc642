"""Pagina de entrega de pecas a alunos (grade aluno x tarefa)."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QColor
from PyQt6.QtWidgets import (
    QAbstractItemView,
    QComboBox,
    QHBoxLayout,
    QLineEdit,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from cliente.frontend.dialogs import report_save_result, show_error
from shared.catalog import CLASSES
from shared.errors import ServiceError, ValidationError

if TYPE_CHECKING:
    from cliente.backend.controller import AppController
    from servidor.domain.models import Part, Student

WITHDRAWN_MARK = "✔"
WITHDRAWN_COLOR = "#dcfce7"


class WithdrawalsPage(QWidget):
    """Grade de alunos por tarefa; cada celda alterna la entrega."""

    def __init__(
        self,
        controller: AppController,
        on_changed: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._on_changed = on_changed
        self._students: list[Student] = []
        self._parts: list[Part] = []

        self._build_ui()

    def _build_ui(self) -> None:
        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(16, 16, 16, 16)

        filters_layout = QHBoxLayout()
        self._class_combo = QComboBox(self)
        self._class_combo.addItems(CLASSES)
        self._search_input = QLineEdit(self)
        self._search_input.setPlaceholderText("Buscar aluno...")
        filters_layout.addWidget(self._class_combo)
        filters_layout.addWidget(self._search_input, 1)

        self._grid = QTableWidget(0, 0, self)
        self._grid.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        self._grid.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)

        root_layout.addLayout(filters_layout)
        root_layout.addWidget(self._grid)

        self._class_combo.currentIndexChanged.connect(lambda _index: self.refresh())
        self._search_input.textChanged.connect(lambda _text: self.refresh())
        self._grid.cellClicked.connect(self._on_cell_clicked)

    def refresh(self) -> None:
        """Reconstruye la grade con el estado actual del controller."""
        self._students = self._controller.students_in_class(
            self._class_combo.currentText(),
            self._search_input.text(),
        )
        self._parts = self._controller.sorted_parts()

        self._grid.clear()
        self._grid.setRowCount(len(self._students))
        self._grid.setColumnCount(len(self._parts))
        self._grid.setHorizontalHeaderLabels([part.id for part in self._parts])
        self._grid.setVerticalHeaderLabels([student.name for student in self._students])

        for row, student in enumerate(self._students):
            for column, part in enumerate(self._parts):
                active = self._controller.is_withdrawn(student.id, part.id)
                item = QTableWidgetItem(WITHDRAWN_MARK if active else "")
                item.setTextAlignment(Qt.AlignmentFlag.AlignCenter)
                if active:
                    item.setBackground(QColor(WITHDRAWN_COLOR))
                self._grid.setItem(row, column, item)

    def _on_cell_clicked(self, row: int, column: int) -> None:
        if row >= len(self._students) or column >= len(self._parts):
            return

        student = self._students[row]
        part = self._parts[column]
        try:
            result = self._controller.toggle_withdrawal(student.id, part.id)
        except (ValidationError, ServiceError) as exc:
            show_error(self, "Entrega não permitida", str(exc))
            return

        report_save_result(self, result)
        self._on_changed()
