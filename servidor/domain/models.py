"""Modelos de dominio de inventario del curso."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TransactionType(str, Enum):
    """Tipo de lancamiento en el libro de movimientos."""

    ENTRY = "ENTRADA"
    EXIT = "SAÍDA"


class Situation(str, Enum):
    """Situacion de compra de una pieza."""

    OK = "OK"
    COMPRAR = "COMPRAR"


@dataclass(slots=True)
class Part:
    """Representa una pieza/tarea del curso que consume stock fisico."""

    id: str
    code: str
    name: str
    target_quantity: float


@dataclass(slots=True)
class Student:
    """Representa un alumno matriculado en una turma."""

    id: str
    name: str
    class_name: str


@dataclass(slots=True)
class Transaction:
    """Entrada o salida de stock asociada a una pieza."""

    id: str
    date: str
    type: TransactionType
    description: str
    part_id: str
    quantity: float


@dataclass(frozen=True, slots=True)
class StudentWithdrawal:
    """Registro de que un alumno recibio una pieza."""

    student_id: str
    part_id: str
    date: str

    @property
    def key(self) -> tuple[str, str]:
        return self.student_id, self.part_id


@dataclass(frozen=True, slots=True)
class StockSummary:
    """Resumen derivado de stock para una pieza. No se persiste."""

    part_id: str
    code: str
    name: str
    target: float
    entries: float
    exits: float
    student_exits: int
    balance: float
    situation: Situation
    to_buy: float


@dataclass(frozen=True, slots=True)
class DashboardStats:
    """Indicadores del panel de inicio."""

    students: int
    total_stock: float
    total_delivered: int
    critical_items: int
    top_purchases: tuple[StockSummary, ...]
