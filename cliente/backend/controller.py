"""Controlador principal del cliente."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from parametros import (
    CRITICAL_STOCK_RATIO,
    DASHBOARD_TOP_PURCHASES,
    DEFAULT_SUMMARY_FILENAME,
    ENFORCE_STOCK_ON_WITHDRAWAL,
    OUTPUT_DIR,
    TARGET_POLICY,
)
from servidor.domain.models import (
    DashboardStats,
    Part,
    StockSummary,
    Student,
    StudentWithdrawal,
    Transaction,
)
from servidor.services.inventory_utils import generate_id, normalize_lookup_key, now_iso
from servidor.services.stock_summary import (
    TargetPolicy,
    balance_for,
    build_dashboard_stats,
    build_stock_summary,
    purchase_list,
    sort_parts,
)
from servidor.services.summary_export import write_summary_csv
from servidor.services.withdrawals import (
    is_withdrawn,
    remove_part_withdrawals,
    toggle_withdrawal,
)
from shared.errors import ServiceError, ValidationError
from shared.protocol import (
    PartDraft,
    SaveCollectionsRequest,
    SaveResult,
    StudentDraft,
    TransactionDraft,
)

from .gateway import ServerGateway
from .validators import (
    validate_output_dir,
    validate_part_draft,
    validate_student_draft,
    validate_transaction_draft,
)

if TYPE_CHECKING:
    from PyQt6.QtWidgets import QApplication

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class _StateSnapshot:
    parts: list[Part]
    students: list[Student]
    transactions: list[Transaction]
    withdrawals: list[StudentWithdrawal]


class AppController:
    """Coordina acciones de UI, estado en memoria y persistencia.

    Las escrituras son optimistas: el estado en memoria se actualiza antes de
    persistir y, si la persistencia falla, se restaura el estado anterior.
    """

    def __init__(
        self,
        gateway: ServerGateway,
        policy: TargetPolicy | str = TARGET_POLICY,
        enforce_stock: bool = ENFORCE_STOCK_ON_WITHDRAWAL,
        clock: Callable[[], str] = now_iso,
        id_factory: Callable[[], str] = generate_id,
    ) -> None:
        self._gateway = gateway
        self._policy = TargetPolicy.parse(policy)
        self._enforce_stock = enforce_stock
        self._clock = clock
        self._id_factory = id_factory

        self._parts: list[Part] = []
        self._students: list[Student] = []
        self._transactions: list[Transaction] = []
        self._withdrawals: list[StudentWithdrawal] = []

    @property
    def policy(self) -> TargetPolicy:
        return self._policy

    def set_policy(self, policy: TargetPolicy | str) -> None:
        """Cambia la base de la meta de compra."""
        self._policy = TargetPolicy.parse(policy)
        LOGGER.info("Politica de meta de compra: %s", self._policy.value)

    @property
    def parts(self) -> list[Part]:
        return list(self._parts)

    @property
    def students(self) -> list[Student]:
        return list(self._students)

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    @property
    def withdrawals(self) -> list[StudentWithdrawal]:
        return list(self._withdrawals)

    def load_all(self) -> bool:
        """Carga todas las colecciones; si falla, registra el error y deja el estado vacio."""
        try:
            response = self._gateway.load_inventory()
        except ServiceError:
            LOGGER.exception("Error al cargar datos del inventario.")
            self._restore(_StateSnapshot([], [], [], []))
            return False

        self._restore(
            _StateSnapshot(
                parts=list(response.parts),
                students=list(response.students),
                transactions=list(response.transactions),
                withdrawals=list(response.withdrawals),
            )
        )
        LOGGER.info(
            "Inventario cargado: parts=%s, students=%s, transactions=%s, withdrawals=%s",
            len(self._parts),
            len(self._students),
            len(self._transactions),
            len(self._withdrawals),
        )
        return True

    # Consultas

    def sorted_parts(self) -> list[Part]:
        return sort_parts(self._parts)

    def find_part(self, part_id: str) -> Part | None:
        for part in self._parts:
            if part.id == part_id:
                return part
        return None

    def students_in_class(self, class_name: str, search: str = "") -> list[Student]:
        """Alumnos de una turma filtrados por nombre, en orden alfabetico."""
        term = search.strip().casefold()
        filtered = [
            student
            for student in self._students
            if student.class_name == class_name and term in student.name.casefold()
        ]
        filtered.sort(key=lambda student: (normalize_lookup_key(student.name), student.name))
        return filtered

    def transactions_newest_first(self) -> list[Transaction]:
        """Lancamientos en orden inverso al registro."""
        return list(reversed(self._transactions))

    def stock_summary(self) -> list[StockSummary]:
        """Recalcula el resumen de stock con el estado actual."""
        return build_stock_summary(
            self._parts,
            self._transactions,
            self._withdrawals,
            total_students=len(self._students),
            policy=self._policy,
        )

    def purchase_list(self) -> list[StockSummary]:
        return purchase_list(self.stock_summary())

    def dashboard_stats(self) -> DashboardStats:
        return build_dashboard_stats(
            self.stock_summary(),
            student_count=len(self._students),
            critical_ratio=CRITICAL_STOCK_RATIO,
            top_purchases=DASHBOARD_TOP_PURCHASES,
        )

    def is_withdrawn(self, student_id: str, part_id: str) -> bool:
        return is_withdrawn(self._withdrawals, student_id, part_id)

    # Mutaciones

    def save_part(self, data: PartDraft, editing: bool = False) -> SaveResult:
        """Crea o edita una pieza; el ID de tarefa identifica la pieza y no se cambia al editar."""
        validate_part_draft(data)
        part = Part(
            id=data.id.strip(),
            code=data.code.strip(),
            name=data.name.strip(),
            target_quantity=data.target_quantity,
        )
        exists = self.find_part(part.id) is not None

        if editing:
            if not exists:
                raise ValidationError(f"Pieza no encontrada: {part.id}")
            updated = [part if current.id == part.id else current for current in self._parts]
        else:
            if exists:
                raise ValidationError(f"Ya existe una pieza con la tarefa: {part.id}")
            updated = [*self._parts, part]

        return self._commit(SaveCollectionsRequest(parts=updated), "guardar pieza")

    def delete_part(self, part_id: str) -> SaveResult:
        """Elimina una pieza y sus entregas en una sola escritura."""
        if self.find_part(part_id) is None:
            raise ValidationError(f"Pieza no encontrada: {part_id}")

        request = SaveCollectionsRequest(
            parts=[part for part in self._parts if part.id != part_id],
            withdrawals=remove_part_withdrawals(self._withdrawals, part_id),
        )
        return self._commit(request, "eliminar pieza")

    def save_student(self, data: StudentDraft, student_id: str | None = None) -> SaveResult:
        """Crea un alumno o edita el alumno ``student_id``."""
        class_name = validate_student_draft(data)
        name = data.name.strip()

        if student_id is None:
            student = Student(id=self._id_factory(), name=name, class_name=class_name)
            updated = [*self._students, student]
        else:
            if not any(student.id == student_id for student in self._students):
                raise ValidationError(f"Alumno no encontrado: {student_id}")
            updated = [
                Student(id=student.id, name=name, class_name=class_name)
                if student.id == student_id
                else student
                for student in self._students
            ]

        return self._commit(SaveCollectionsRequest(students=updated), "guardar alumno")

    def delete_student(self, student_id: str) -> SaveResult:
        """Elimina un alumno; sus entregas se conservan porque el material ya salio del stock."""
        updated = [student for student in self._students if student.id != student_id]
        if len(updated) == len(self._students):
            raise ValidationError(f"Alumno no encontrado: {student_id}")

        return self._commit(SaveCollectionsRequest(students=updated), "eliminar alumno")

    def add_transaction(self, data: TransactionDraft) -> SaveResult:
        """Registra una entrada o salida de stock."""
        transaction_type = validate_transaction_draft(data)
        transaction = Transaction(
            id=self._id_factory(),
            date=data.date.strip(),
            type=transaction_type,
            description=data.description.strip(),
            part_id=data.part_id.strip(),
            quantity=data.quantity,
        )
        updated = [*self._transactions, transaction]
        return self._commit(SaveCollectionsRequest(transactions=updated), "registrar lancamiento")

    def delete_transaction(self, transaction_id: str) -> SaveResult:
        """Estorna un lancamiento."""
        updated = [
            transaction for transaction in self._transactions if transaction.id != transaction_id
        ]
        if len(updated) == len(self._transactions):
            raise ValidationError(f"Lancamiento no encontrado: {transaction_id}")

        return self._commit(SaveCollectionsRequest(transactions=updated), "estornar lancamiento")

    def toggle_withdrawal(self, student_id: str, part_id: str) -> SaveResult:
        """Marca o desmarca la entrega; rechaza entregar sin saldo si esta habilitado."""
        available_balance = None
        if self._enforce_stock:
            available_balance = balance_for(self.stock_summary(), part_id)

        updated = toggle_withdrawal(
            self._withdrawals,
            student_id,
            part_id,
            date=self._clock(),
            available_balance=available_balance,
        )
        return self._commit(SaveCollectionsRequest(withdrawals=updated), "alternar entrega")

    def export_stock_summary(
        self,
        output_dir: Path = OUTPUT_DIR,
        filename: str = DEFAULT_SUMMARY_FILENAME,
    ) -> str:
        """Exporta el resumen actual a CSV y retorna la ruta creada."""
        if not filename.strip():
            raise ValidationError("El nombre del archivo no puede estar vacio.")

        validate_output_dir(output_dir)
        output_path = write_summary_csv(self.stock_summary(), output_dir / filename.strip())
        return str(output_path)

    def on_exit(
        self,
        app: QApplication | Callable[[], None] | None,
    ) -> None:
        """Cierra la aplicacion."""
        LOGGER.info("Accion ejecutada: salir")

        if callable(app):
            app()
            return

        if app is not None:
            app.quit()

    def _commit(self, request: SaveCollectionsRequest, action: str) -> SaveResult:
        """Aplica el cambio en memoria, persiste y revierte si la persistencia falla."""
        collections = request.collection_names()
        previous = self._snapshot()
        self._apply(request)

        try:
            self._gateway.save_collections(request)
        except ServiceError as exc:
            self._restore(previous)
            LOGGER.error("Fallo al %s (%s): %s", action, ", ".join(collections), exc)
            return SaveResult.failure(
                f"Error al guardar en la base de datos: {exc}",
                collections,
            )

        LOGGER.info("Accion completada: %s (%s)", action, ", ".join(collections))
        return SaveResult.success(collections)

    def _snapshot(self) -> _StateSnapshot:
        return _StateSnapshot(
            parts=list(self._parts),
            students=list(self._students),
            transactions=list(self._transactions),
            withdrawals=list(self._withdrawals),
        )

    def _apply(self, request: SaveCollectionsRequest) -> None:
        if request.parts is not None:
            self._parts = list(request.parts)
        if request.students is not None:
            self._students = list(request.students)
        if request.transactions is not None:
            self._transactions = list(request.transactions)
        if request.withdrawals is not None:
            self._withdrawals = list(request.withdrawals)

    def _restore(self, snapshot: _StateSnapshot) -> None:
        self._parts = snapshot.parts
        self._students = snapshot.students
        self._transactions = snapshot.transactions
        self._withdrawals = snapshot.withdrawals
