"""Dialogos modales para crear/editar piezas, alumnos y lancamientos."""

from __future__ import annotations

from collections.abc import Sequence

from PyQt6.QtCore import QDate
from PyQt6.QtWidgets import (
    QComboBox,
    QDateEdit,
    QDialog,
    QDialogButtonBox,
    QDoubleSpinBox,
    QFormLayout,
    QLineEdit,
    QSpinBox,
    QVBoxLayout,
    QWidget,
)

from servidor.domain.models import Part, Student, TransactionType
from shared.catalog import CLASSES
from shared.protocol import PartDraft, StudentDraft, TransactionDraft

_DIALOG_STYLE = """
QDialog {
    background-color: #ffffff;
}
QLineEdit, QComboBox, QSpinBox, QDoubleSpinBox, QDateEdit {
    border: 1px solid #d1d5db;
    border-radius: 8px;
    font-family: "Segoe UI";
    font-size: 14px;
    min-height: 32px;
    padding: 2px 8px;
}
QPushButton {
    background-color: #C80202;
    border: none;
    border-radius: 8px;
    color: #ffffff;
    font-weight: 600;
    min-height: 32px;
    min-width: 90px;
}
"""


class _RecordDialog(QDialog):
    """Base comun: layout de formulario con botones Guardar/Cancelar."""

    def __init__(self, title: str, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(title)
        self.setModal(True)
        self.setMinimumWidth(420)
        self.setStyleSheet(_DIALOG_STYLE)

        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(18, 18, 18, 18)
        self._form = QFormLayout()
        self._form.setSpacing(10)
        root_layout.addLayout(self._form)

        buttons = QDialogButtonBox(
            QDialogButtonBox.StandardButton.Save | QDialogButtonBox.StandardButton.Cancel,
            self,
        )
        buttons.accepted.connect(self.accept)
        buttons.rejected.connect(self.reject)
        root_layout.addWidget(buttons)


class PartDialog(_RecordDialog):
    """Formulario de pieza. Al editar, la tarefa queda bloqueada."""

    def __init__(self, part: Part | None = None, parent: QWidget | None = None) -> None:
        super().__init__("Editar Peça" if part else "Nova Peça", parent)

        self._id_input = QLineEdit(self)
        self._id_input.setPlaceholderText("Ex.: T1")
        self._code_input = QLineEdit(self)
        self._name_input = QLineEdit(self)
        self._target_input = QSpinBox(self)
        self._target_input.setRange(0, 100000)

        self._form.addRow("Tarefa", self._id_input)
        self._form.addRow("Código", self._code_input)
        self._form.addRow("Nome", self._name_input)
        self._form.addRow("Necessidade", self._target_input)

        if part is not None:
            self._id_input.setText(part.id)
            self._id_input.setReadOnly(True)
            self._code_input.setText(part.code)
            self._name_input.setText(part.name)
            self._target_input.setValue(int(part.target_quantity))

    def draft(self) -> PartDraft:
        return PartDraft(
            id=self._id_input.text(),
            code=self._code_input.text(),
            name=self._name_input.text(),
            target_quantity=self._target_input.value(),
        )


class StudentDialog(_RecordDialog):
    """Formulario de alumno."""

    def __init__(
        self,
        student: Student | None = None,
        default_class: str = CLASSES[0],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__("Editar Aluno" if student else "Novo Aluno", parent)

        self._name_input = QLineEdit(self)
        self._class_combo = QComboBox(self)
        self._class_combo.addItems(CLASSES)

        self._form.addRow("Nome", self._name_input)
        self._form.addRow("Turma", self._class_combo)

        selected_class = student.class_name if student is not None else default_class
        if student is not None:
            self._name_input.setText(student.name)
        index = self._class_combo.findText(selected_class)
        if index >= 0:
            self._class_combo.setCurrentIndex(index)

    def draft(self) -> StudentDraft:
        return StudentDraft(
            name=self._name_input.text(),
            class_name=self._class_combo.currentText(),
        )


class TransactionDialog(_RecordDialog):
    """Formulario de lancamiento de entrada/saida."""

    def __init__(self, parts: Sequence[Part], parent: QWidget | None = None) -> None:
        super().__init__("Novo Lançamento", parent)

        self._date_input = QDateEdit(QDate.currentDate(), self)
        self._date_input.setCalendarPopup(True)
        self._date_input.setDisplayFormat("dd/MM/yyyy")
        self._type_combo = QComboBox(self)
        for transaction_type in TransactionType:
            self._type_combo.addItem(transaction_type.value, transaction_type.value)
        self._part_combo = QComboBox(self)
        for part in parts:
            self._part_combo.addItem(f"{part.id} - {part.name}", part.id)
        self._description_input = QLineEdit(self)
        self._quantity_input = QDoubleSpinBox(self)
        self._quantity_input.setDecimals(0)
        self._quantity_input.setRange(-100000, 100000)

        self._form.addRow("Data", self._date_input)
        self._form.addRow("Tipo", self._type_combo)
        self._form.addRow("Tarefa", self._part_combo)
        self._form.addRow("Descrição", self._description_input)
        self._form.addRow("Quantidade", self._quantity_input)

    def draft(self) -> TransactionDraft:
        return TransactionDraft(
            date=self._date_input.date().toString("yyyy-MM-dd"),
            type=self._type_combo.currentData() or "",
            description=self._description_input.text(),
            part_id=self._part_combo.currentData() or "",
            quantity=int(self._quantity_input.value()),
        )
