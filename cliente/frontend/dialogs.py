"""Helpers de dialogos para frontend."""

from __future__ import annotations

from PyQt6.QtWidgets import QMessageBox, QWidget

from shared.protocol import SaveResult


def show_info(parent: QWidget | None, title: str, message: str) -> None:
    """Muestra un dialogo informativo."""
    QMessageBox.information(parent, title, message)


def show_error(parent: QWidget | None, title: str, message: str) -> None:
    """Muestra un dialogo de error."""
    QMessageBox.critical(parent, title, message)


def ask_confirmation(parent: QWidget | None, title: str, message: str) -> bool:
    """Pide confirmacion antes de una accion destructiva."""
    answer = QMessageBox.question(
        parent,
        title,
        message,
        QMessageBox.StandardButton.Yes | QMessageBox.StandardButton.No,
        QMessageBox.StandardButton.No,
    )
    return answer == QMessageBox.StandardButton.Yes


def report_save_result(parent: QWidget | None, result: SaveResult) -> bool:
    """Muestra alerta bloqueante si la escritura fallo; retorna ``result.ok``."""
    if not result.ok:
        show_error(parent, "Erro de sincronização", result.message)
    return result.ok
