"""Paginas de administracion: lancamientos, piezas y alumnos."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING

from PyQt6.QtWidgets import QComboBox, QHBoxLayout, QPushButton, QVBoxLayout, QWidget

from cliente.frontend.dialogs import ask_confirmation, report_save_result, show_error
from cliente.frontend.record_dialogs import PartDialog, StudentDialog, TransactionDialog
from cliente.frontend.widgets.tables import build_table, fill_table, selected_row
from servidor.services.inventory_utils import format_date, format_quantity
from shared.catalog import CLASSES
from shared.errors import ServiceError, ValidationError

if TYPE_CHECKING:
    from cliente.backend.controller import AppController
    from servidor.domain.models import Part, Student, Transaction


class _RecordsPage(QWidget):
    """Base: barra de botones + tabla, y refresco global tras cada cambio."""

    def __init__(
        self,
        controller: AppController,
        on_changed: Callable[[], None],
        headers: tuple[str, ...],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(parent)
        self._controller = controller
        self._on_changed = on_changed

        root_layout = QVBoxLayout(self)
        root_layout.setContentsMargins(16, 16, 16, 16)
        self._toolbar = QHBoxLayout()
        root_layout.addLayout(self._toolbar)
        self._table = build_table(headers, self)
        root_layout.addWidget(self._table)

    def _add_button(self, text: str, slot: Callable[[], None]) -> QPushButton:
        button = QPushButton(text, self)
        button.clicked.connect(lambda _checked=False: slot())
        self._toolbar.addWidget(button)
        return button

    def _run(self, action: Callable[[], object], title: str) -> None:
        """Ejecuta una mutacion del controller mostrando errores de validacion o guardado."""
        try:
            result = action()
        except (ValidationError, ServiceError) as exc:
            show_error(self, title, str(exc))
            return

        report_save_result(self, result)
        self._on_changed()


class TransactionsPage(_RecordsPage):
    """Entradas y saidas de stock, mas recientes primero."""

    def __init__(
        self,
        controller: AppController,
        on_changed: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(
            controller,
            on_changed,
            ("Data", "Tipo", "Tarefa", "Descrição", "Quantidade"),
            parent,
        )
        self._add_button("Novo lançamento", self._on_add_clicked)
        self._add_button("Estornar", self._on_delete_clicked)
        self._toolbar.addStretch(1)
        self._rows: list[Transaction] = []

    def refresh(self) -> None:
        self._rows = self._controller.transactions_newest_first()
        fill_table(
            self._table,
            [
                [
                    format_date(transaction.date),
                    transaction.type.value,
                    transaction.part_id,
                    transaction.description,
                    format_quantity(transaction.quantity),
                ]
                for transaction in self._rows
            ],
        )

    def _on_add_clicked(self) -> None:
        dialog = TransactionDialog(self._controller.sorted_parts(), parent=self)
        if dialog.exec():
            self._run(lambda: self._controller.add_transaction(dialog.draft()), "Erro no lançamento")

    def _on_delete_clicked(self) -> None:
        row = selected_row(self._table)
        if row is None:
            return
        transaction = self._rows[row]
        if ask_confirmation(self, "Estornar Lançamento", "Remover este registro?"):
            self._run(
                lambda: self._controller.delete_transaction(transaction.id),
                "Erro ao estornar",
            )


class PartsPage(_RecordsPage):
    """Cadastro de pecas/tarefas."""

    def __init__(
        self,
        controller: AppController,
        on_changed: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(controller, on_changed, ("Tarefa", "Código", "Nome", "Necessidade"), parent)
        self._add_button("Nova peça", self._on_add_clicked)
        self._add_button("Editar", self._on_edit_clicked)
        self._add_button("Excluir", self._on_delete_clicked)
        self._toolbar.addStretch(1)
        self._rows: list[Part] = []

    def refresh(self) -> None:
        self._rows = self._controller.sorted_parts()
        fill_table(
            self._table,
            [
                [part.id, part.code, part.name, format_quantity(part.target_quantity)]
                for part in self._rows
            ],
        )

    def _on_add_clicked(self) -> None:
        dialog = PartDialog(parent=self)
        if dialog.exec():
            self._run(lambda: self._controller.save_part(dialog.draft()), "Erro ao salvar peça")

    def _on_edit_clicked(self) -> None:
        row = selected_row(self._table)
        if row is None:
            return
        dialog = PartDialog(self._rows[row], parent=self)
        if dialog.exec():
            self._run(
                lambda: self._controller.save_part(dialog.draft(), editing=True),
                "Erro ao salvar peça",
            )

    def _on_delete_clicked(self) -> None:
        row = selected_row(self._table)
        if row is None:
            return
        part = self._rows[row]
        if ask_confirmation(self, "Excluir Tarefa", f"Remover a {part.id} permanentemente?"):
            self._run(lambda: self._controller.delete_part(part.id), "Erro ao excluir peça")


class StudentsPage(_RecordsPage):
    """Cadastro de alunos por turma."""

    def __init__(
        self,
        controller: AppController,
        on_changed: Callable[[], None],
        parent: QWidget | None = None,
    ) -> None:
        super().__init__(controller, on_changed, ("Nome", "Turma"), parent)
        self._class_combo = QComboBox(self)
        self._class_combo.addItems(CLASSES)
        self._class_combo.currentIndexChanged.connect(lambda _index: self.refresh())
        self._toolbar.addWidget(self._class_combo)
        self._add_button("Novo aluno", self._on_add_clicked)
        self._add_button("Editar", self._on_edit_clicked)
        self._add_button("Excluir", self._on_delete_clicked)
        self._toolbar.addStretch(1)
        self._rows: list[Student] = []

    def refresh(self) -> None:
        self._rows = self._controller.students_in_class(self._class_combo.currentText())
        fill_table(self._table, [[student.name, student.class_name] for student in self._rows])

    def _on_add_clicked(self) -> None:
        dialog = StudentDialog(default_class=self._class_combo.currentText(), parent=self)
        if dialog.exec():
            self._run(lambda: self._controller.save_student(dialog.draft()), "Erro ao salvar aluno")

    def _on_edit_clicked(self) -> None:
        row = selected_row(self._table)
        if row is None:
            return
        student = self._rows[row]
        dialog = StudentDialog(student, parent=self)
        if dialog.exec():
            self._run(
                lambda: self._controller.save_student(dialog.draft(), student_id=student.id),
                "Erro ao salvar aluno",
            )

    def _on_delete_clicked(self) -> None:
        row = selected_row(self._table)
        if row is None:
            return
        student = self._rows[row]
        if ask_confirmation(self, "Remover Aluno", "Deseja excluir este registro?"):
            self._run(lambda: self._controller.delete_student(student.id), "Erro ao excluir aluno")
