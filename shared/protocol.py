"""DTOs del protocolo cliente-servidor."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from servidor.domain.models import Part, Student, StudentWithdrawal, Transaction


@dataclass(slots=True)
class PartDraft:
    """DTO para capturar datos del formulario de piezas."""

    id: str
    code: str
    name: str
    target_quantity: float


@dataclass(slots=True)
class StudentDraft:
    """DTO para capturar datos del formulario de alumnos."""

    name: str
    class_name: str


@dataclass(slots=True)
class TransactionDraft:
    """DTO para capturar un lancamiento de entrada o salida."""

    date: str
    type: str
    description: str
    part_id: str
    quantity: float


@dataclass(slots=True)
class LoadInventoryResponse:
    """Respuesta con las cuatro colecciones cargadas."""

    parts: list[Part]
    students: list[Student]
    transactions: list[Transaction]
    withdrawals: list[StudentWithdrawal]


@dataclass(slots=True)
class SaveCollectionsRequest:
    """Solicitud para reemplazar colecciones completas en una sola unidad.

    Las colecciones en None no se modifican.
    """

    parts: list[Part] | None = None
    students: list[Student] | None = None
    transactions: list[Transaction] | None = None
    withdrawals: list[StudentWithdrawal] | None = None

    def collection_names(self) -> list[str]:
        """Nombres de las colecciones incluidas en la solicitud."""
        names = ("parts", "students", "transactions", "withdrawals")
        return [name for name in names if getattr(self, name) is not None]


@dataclass(slots=True)
class SaveResult:
    """Resultado de una escritura; si fallo, el estado en memoria ya fue revertido."""

    ok: bool
    message: str = ""
    collections: list[str] = field(default_factory=list)

    @classmethod
    def success(cls, collections: list[str]) -> SaveResult:
        return cls(ok=True, collections=collections)

    @classmethod
    def failure(cls, message: str, collections: list[str]) -> SaveResult:
        return cls(ok=False, message=message, collections=collections)
