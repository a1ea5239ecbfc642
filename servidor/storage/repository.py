"""Repositorio de colecciones del inventario sobre un backend intercambiable."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, TypeVar

from servidor.domain.models import (
    Part,
    Student,
    StudentWithdrawal,
    Transaction,
    TransactionType,
)
from shared.catalog import INITIAL_PARTS, INITIAL_STUDENTS
from shared.errors import ServiceError, StorageError

from .backends import Records, StorageBackend

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def part_to_record(part: Part) -> dict[str, Any]:
    return {
        "id": part.id,
        "code": part.code,
        "name": part.name,
        "targetQuantity": part.target_quantity,
    }


def part_from_record(record: Mapping[str, Any]) -> Part:
    return Part(
        id=str(record["id"]),
        code=str(record.get("code", "")),
        name=str(record.get("name", "")),
        target_quantity=record.get("targetQuantity", 0),
    )


def student_to_record(student: Student) -> dict[str, Any]:
    return {"id": student.id, "name": student.name, "class": student.class_name}


def student_from_record(record: Mapping[str, Any]) -> Student:
    return Student(
        id=str(record["id"]),
        name=str(record.get("name", "")),
        class_name=str(record.get("class", "")),
    )


def transaction_to_record(transaction: Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "date": transaction.date,
        "type": transaction.type.value,
        "description": transaction.description,
        "partId": transaction.part_id,
        "quantity": transaction.quantity,
    }


def transaction_from_record(record: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=str(record["id"]),
        date=str(record.get("date", "")),
        type=TransactionType(record["type"]),
        description=str(record.get("description", "")),
        part_id=str(record["partId"]),
        quantity=record.get("quantity", 0),
    )


def withdrawal_to_record(withdrawal: StudentWithdrawal) -> dict[str, Any]:
    return {
        "studentId": withdrawal.student_id,
        "partId": withdrawal.part_id,
        "date": withdrawal.date,
    }


def withdrawal_from_record(record: Mapping[str, Any]) -> StudentWithdrawal:
    return StudentWithdrawal(
        student_id=str(record["studentId"]),
        part_id=str(record["partId"]),
        date=str(record.get("date", "")),
    )


class InventoryRepository:
    """Lee y reemplaza colecciones completas; retorna datos iniciales si nunca se escribieron."""

    def __init__(self, storage: StorageBackend) -> None:
        self._storage = storage

    def get_parts(self) -> list[Part]:
        return self._load("parts", part_from_record, default=INITIAL_PARTS)

    def save_parts(self, parts: Sequence[Part]) -> None:
        self.transact(parts=parts)

    def get_students(self) -> list[Student]:
        return self._load("students", student_from_record, default=INITIAL_STUDENTS)

    def save_students(self, students: Sequence[Student]) -> None:
        self.transact(students=students)

    def get_transactions(self) -> list[Transaction]:
        return self._load("transactions", transaction_from_record)

    def save_transactions(self, transactions: Sequence[Transaction]) -> None:
        self.transact(transactions=transactions)

    def get_withdrawals(self) -> list[StudentWithdrawal]:
        return self._load("withdrawals", withdrawal_from_record)

    def save_withdrawals(self, withdrawals: Sequence[StudentWithdrawal]) -> None:
        self.transact(withdrawals=withdrawals)

    def transact(
        self,
        parts: Sequence[Part] | None = None,
        students: Sequence[Student] | None = None,
        transactions: Sequence[Transaction] | None = None,
        withdrawals: Sequence[StudentWithdrawal] | None = None,
    ) -> None:
        """Reemplaza en una sola unidad las colecciones informadas (None = sin cambios)."""
        changes: dict[str, Records] = {}
        if parts is not None:
            changes["parts"] = [part_to_record(part) for part in parts]
        if students is not None:
            changes["students"] = [student_to_record(student) for student in students]
        if transactions is not None:
            changes["transactions"] = [
                transaction_to_record(transaction) for transaction in transactions
            ]
        if withdrawals is not None:
            changes["withdrawals"] = [
                withdrawal_to_record(withdrawal) for withdrawal in withdrawals
            ]

        if not changes:
            return

        try:
            self._storage.transact(changes)
        except ServiceError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al persistir colecciones: %s", sorted(changes))
            raise StorageError("No fue posible persistir colecciones.") from exc

        LOGGER.info(
            "Colecciones persistidas: %s",
            ", ".join(f"{name}={len(items)}" for name, items in changes.items()),
        )

    def _load(
        self,
        collection: str,
        parser: Callable[[Mapping[str, Any]], T],
        default: Iterable[Mapping[str, Any]] = (),
    ) -> list[T]:
        try:
            records = self._storage.read(collection)
        except ServiceError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al leer coleccion: %s", collection)
            raise StorageError(f"No fue posible leer la coleccion: {collection}") from exc

        if records is None:
            LOGGER.info("Coleccion sin datos, usando valores iniciales: %s", collection)
            records = list(default)

        items: list[T] = []
        for index, record in enumerate(records):
            try:
                items.append(parser(record))
            except (KeyError, TypeError, ValueError, AttributeError) as exc:
                raise StorageError(
                    f"Registro invalido en '{collection}' (posicion {index})."
                ) from exc
        return items
