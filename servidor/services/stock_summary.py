"""Derivacion del resumen de stock y necesidad de compra por pieza."""

from __future__ import annotations

import math
import re
from collections import Counter, defaultdict
from collections.abc import Iterable, Sequence
from enum import Enum
from functools import cmp_to_key

from servidor.domain.models import (
    DashboardStats,
    Part,
    Situation,
    StockSummary,
    StudentWithdrawal,
    Transaction,
    TransactionType,
)

_NON_DIGITS_PATTERN = re.compile(r"\D")

DEFAULT_CRITICAL_RATIO = 0.1
DEFAULT_TOP_PURCHASES = 3


class TargetPolicy(str, Enum):
    """Base usada como meta para decidir la compra."""

    FIXED_TARGET = "fixed_target"
    REMAINING_STUDENTS = "remaining_students"

    @classmethod
    def parse(cls, value: str | TargetPolicy) -> TargetPolicy:
        """Convierte texto de configuracion a politica; levanta ValueError si no existe."""
        if isinstance(value, TargetPolicy):
            return value
        return cls(value.strip().lower())


def extract_task_number(task_id: str) -> int:
    """Une todos los digitos del ID de tarea como entero (0 si no tiene digitos)."""
    digits = _NON_DIGITS_PATTERN.sub("", task_id)
    return int(digits) if digits else 0


def sort_task_ids(a_id: str, b_id: str) -> int:
    """Comparador natural: primero la parte numerica y luego el texto sin distinguir mayusculas."""
    num_a = extract_task_number(a_id)
    num_b = extract_task_number(b_id)
    if num_a != num_b:
        return num_a - num_b
    text_a = (a_id.casefold(), a_id)
    text_b = (b_id.casefold(), b_id)
    if text_a == text_b:
        return 0
    return -1 if text_a < text_b else 1


task_sort_key = cmp_to_key(sort_task_ids)


def sort_parts(parts: Iterable[Part]) -> list[Part]:
    """Retorna una copia de las piezas en orden natural de tarea."""
    return sorted(parts, key=lambda part: task_sort_key(part.id))


def build_stock_summary(
    parts: Sequence[Part],
    transactions: Iterable[Transaction],
    withdrawals: Iterable[StudentWithdrawal],
    total_students: int = 0,
    policy: TargetPolicy = TargetPolicy.FIXED_TARGET,
) -> list[StockSummary]:
    """Calcula saldo, situacion y cantidad a comprar para cada pieza.

    ``balance = entradas - salidas - entregas a alumnos``. La meta es la cantidad
    fija de la pieza o, con ``REMAINING_STUDENTS``, los alumnos que aun no recibieron
    la pieza. Las cantidades no se validan: valores NaN o negativos se propagan.
    """
    entries_by_part: defaultdict[str, float] = defaultdict(float)
    exits_by_part: defaultdict[str, float] = defaultdict(float)
    for transaction in transactions:
        if transaction.type is TransactionType.ENTRY:
            entries_by_part[transaction.part_id] += transaction.quantity
        elif transaction.type is TransactionType.EXIT:
            exits_by_part[transaction.part_id] += transaction.quantity

    withdrawals_by_part = Counter(withdrawal.part_id for withdrawal in withdrawals)

    summary: list[StockSummary] = []
    for part in sort_parts(parts):
        entries = entries_by_part.get(part.id, 0)
        exits = exits_by_part.get(part.id, 0)
        student_exits = withdrawals_by_part.get(part.id, 0)
        balance = entries - exits - student_exits

        if policy is TargetPolicy.REMAINING_STUDENTS:
            target = total_students - student_exits
        else:
            target = part.target_quantity

        shortfall = target - balance
        to_buy = shortfall if math.isnan(shortfall) or shortfall > 0 else 0

        summary.append(
            StockSummary(
                part_id=part.id,
                code=part.code,
                name=part.name,
                target=target,
                entries=entries,
                exits=exits,
                student_exits=student_exits,
                balance=balance,
                situation=Situation.OK if balance >= target else Situation.COMPRAR,
                to_buy=to_buy,
            )
        )

    return summary


def balance_for(summary: Iterable[StockSummary], part_id: str) -> float:
    """Saldo actual de una pieza; 0 si no aparece en el resumen."""
    for item in summary:
        if item.part_id == part_id:
            return item.balance
    return 0


def purchase_list(summary: Iterable[StockSummary]) -> list[StockSummary]:
    """Piezas en situacion COMPRAR (incluye cantidades NaN), en el orden del resumen."""
    return [item for item in summary if item.situation is Situation.COMPRAR]


def build_dashboard_stats(
    summary: Sequence[StockSummary],
    student_count: int,
    critical_ratio: float = DEFAULT_CRITICAL_RATIO,
    top_purchases: int = DEFAULT_TOP_PURCHASES,
) -> DashboardStats:
    """Calcula los indicadores del panel de inicio."""
    critical_items = sum(
        1 for item in summary if item.balance < item.entries * critical_ratio
    )
    return DashboardStats(
        students=student_count,
        total_stock=sum(item.balance for item in summary),
        total_delivered=sum(item.student_exits for item in summary),
        critical_items=critical_items,
        top_purchases=tuple(purchase_list(summary)[:top_purchases]),
    )
