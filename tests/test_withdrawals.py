"""Tests para reglas de entrega de piezas a alumnos."""

from __future__ import annotations

import unittest

from servidor.domain.models import StudentWithdrawal
from servidor.services.withdrawals import (
    is_withdrawn,
    remove_part_withdrawals,
    toggle_withdrawal,
)
from shared.errors import ValidationError


class ToggleWithdrawalTests(unittest.TestCase):
    """Valida la alternancia de entregas por par (alumno, pieza)."""

    def setUp(self) -> None:
        self.withdrawals = [
            StudentWithdrawal(student_id="1", part_id="T1", date="2024-03-01T10:00:00"),
            StudentWithdrawal(student_id="2", part_id="T1", date="2024-03-01T10:05:00"),
        ]

    def test_toggle_adds_missing_withdrawal(self) -> None:
        """Debe agregar la entrega si el alumno no tenia la pieza."""
        updated = toggle_withdrawal(self.withdrawals, "1", "T2", date="2024-03-02T08:00:00")

        self.assertEqual(len(updated), 3)
        self.assertTrue(is_withdrawn(updated, "1", "T2"))
        self.assertEqual(updated[-1].date, "2024-03-02T08:00:00")
        self.assertEqual(len(self.withdrawals), 2)

    def test_toggle_removes_existing_withdrawal(self) -> None:
        """Debe quitar la entrega existente sin tocar las demas."""
        updated = toggle_withdrawal(self.withdrawals, "1", "T1", date="2024-03-02T08:00:00")

        self.assertEqual(updated, [self.withdrawals[1]])

    def test_double_toggle_restores_membership(self) -> None:
        """Alternar dos veces vuelve al estado original de pertenencia."""
        for student_id, part_id in (("1", "T1"), ("3", "T5A")):
            before = is_withdrawn(self.withdrawals, student_id, part_id)
            once = toggle_withdrawal(self.withdrawals, student_id, part_id, date="d1")
            twice = toggle_withdrawal(once, student_id, part_id, date="d2")

            self.assertNotEqual(is_withdrawn(once, student_id, part_id), before)
            self.assertEqual(is_withdrawn(twice, student_id, part_id), before)
            self.assertEqual(
                {withdrawal.key for withdrawal in twice},
                {withdrawal.key for withdrawal in self.withdrawals},
            )

    def test_refuses_when_balance_is_not_positive(self) -> None:
        """Sin saldo, la entrega nueva debe rechazarse."""
        for balance in (0, -3, float("nan")):
            with self.assertRaises(ValidationError):
                toggle_withdrawal(
                    self.withdrawals,
                    "3",
                    "T1",
                    date="d",
                    available_balance=balance,
                )

    def test_removal_allowed_without_balance(self) -> None:
        """Desmarcar una entrega no depende del saldo."""
        updated = toggle_withdrawal(
            self.withdrawals,
            "2",
            "T1",
            date="d",
            available_balance=0,
        )

        self.assertFalse(is_withdrawn(updated, "2", "T1"))

    def test_no_duplicates_for_same_pair(self) -> None:
        """Nunca debe haber dos registros para el mismo par."""
        updated = toggle_withdrawal(self.withdrawals, "3", "T1", date="d", available_balance=5)
        keys = [withdrawal.key for withdrawal in updated]

        self.assertEqual(len(keys), len(set(keys)))


class RemovePartWithdrawalsTests(unittest.TestCase):
    """Valida la eliminacion en cascada por pieza."""

    def test_removes_only_matching_part(self) -> None:
        """No debe quedar ninguna entrega de la pieza eliminada."""
        withdrawals = [
            StudentWithdrawal(student_id="1", part_id="T1", date="d"),
            StudentWithdrawal(student_id="1", part_id="T2", date="d"),
            StudentWithdrawal(student_id="2", part_id="T1", date="d"),
        ]

        updated = remove_part_withdrawals(withdrawals, "T1")

        self.assertEqual([withdrawal.part_id for withdrawal in updated], ["T2"])


if __name__ == "__main__":
    unittest.main()
