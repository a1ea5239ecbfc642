"""Reglas de entrega de piezas a alumnos."""

from __future__ import annotations

from collections.abc import Iterable

from servidor.domain.models import StudentWithdrawal
from shared.errors import ValidationError


def is_withdrawn(
    withdrawals: Iterable[StudentWithdrawal],
    student_id: str,
    part_id: str,
) -> bool:
    """Indica si el alumno ya recibio la pieza."""
    key = (student_id, part_id)
    return any(withdrawal.key == key for withdrawal in withdrawals)


def toggle_withdrawal(
    withdrawals: list[StudentWithdrawal],
    student_id: str,
    part_id: str,
    date: str,
    available_balance: float | None = None,
) -> list[StudentWithdrawal]:
    """Alterna la entrega de una pieza y retorna la nueva lista.

    Si el alumno ya tiene la pieza se elimina el registro. Si no la tiene y se
    informa ``available_balance``, la entrega se rechaza cuando el saldo es <= 0.
    """
    key = (student_id, part_id)
    remaining = [withdrawal for withdrawal in withdrawals if withdrawal.key != key]
    if len(remaining) != len(withdrawals):
        return remaining

    if available_balance is not None and not available_balance > 0:
        raise ValidationError(
            f"Sin saldo disponible para la pieza {part_id}. Registra una entrada antes de entregar."
        )

    return [
        *withdrawals,
        StudentWithdrawal(student_id=student_id, part_id=part_id, date=date),
    ]


def remove_part_withdrawals(
    withdrawals: Iterable[StudentWithdrawal],
    part_id: str,
) -> list[StudentWithdrawal]:
    """Elimina las entregas que referencian una pieza."""
    return [withdrawal for withdrawal in withdrawals if withdrawal.part_id != part_id]
