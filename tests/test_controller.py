"""Tests de AppController: escrituras optimistas, rollback y reglas de entrega."""

from __future__ import annotations

import csv
import itertools
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from cliente.backend.controller import AppController
from cliente.backend.gateway import LocalServerGateway
from servidor.domain.models import Situation, StudentWithdrawal
from servidor.services.stock_summary import TargetPolicy
from servidor.storage.backends import InMemoryStorage
from servidor.storage.repository import InventoryRepository
from shared.csv_schema import SUMMARY_HEADERS
from shared.errors import ServiceError, ValidationError
from shared.protocol import PartDraft, StudentDraft, TransactionDraft


class AppControllerTests(unittest.TestCase):
    """Valida operaciones del controller sobre almacenamiento en memoria."""

    def setUp(self) -> None:
        self.storage = InMemoryStorage(
            {
                "parts": [
                    {"id": "T10", "code": "1020430", "name": "Tarefa 10", "targetQuantity": 5},
                    {"id": "T1", "code": "1003198", "name": "Tarefa 1", "targetQuantity": 10},
                    {"id": "T2", "code": "1003197", "name": "Tarefa 2", "targetQuantity": 3},
                ],
                "students": [
                    {"id": "1", "name": "Óscar Lima", "class": "Turma A - Manhã"},
                    {"id": "2", "name": "Ana Souza", "class": "Turma A - Manhã"},
                    {"id": "3", "name": "Bruno Dias", "class": "Turma A - Manhã"},
                    {"id": "4", "name": "Carla Reis", "class": "Turma B - Tarde"},
                ],
                "transactions": [
                    {
                        "id": "t1",
                        "date": "2024-03-01",
                        "type": "ENTRADA",
                        "description": "Compra",
                        "partId": "T1",
                        "quantity": 12,
                    }
                ],
                "withdrawals": [
                    {"studentId": "1", "partId": "T1", "date": "2024-03-02T09:00:00"},
                    {"studentId": "2", "partId": "T1", "date": "2024-03-02T09:01:00"},
                    {"studentId": "3", "partId": "T1", "date": "2024-03-02T09:02:00"},
                    {"studentId": "1", "partId": "T2", "date": "2024-03-02T09:03:00"},
                ],
            }
        )
        self.repository = InventoryRepository(self.storage)
        self.gateway = LocalServerGateway(self.repository)
        counter = itertools.count(1)
        self.controller = AppController(
            gateway=self.gateway,
            policy=TargetPolicy.FIXED_TARGET,
            enforce_stock=True,
            clock=lambda: "2024-03-05T10:00:00",
            id_factory=lambda: f"id{next(counter)}",
        )
        self.assertTrue(self.controller.load_all())

    def test_load_failure_leaves_empty_state(self) -> None:
        """Si la carga falla, el estado queda vacio y retorna False."""
        with mock.patch.object(
            self.gateway,
            "load_inventory",
            side_effect=ServiceError("sin conexion"),
        ):
            loaded = self.controller.load_all()

        self.assertFalse(loaded)
        self.assertEqual(self.controller.parts, [])
        self.assertEqual(self.controller.stock_summary(), [])

    def test_stock_summary_reference_example(self) -> None:
        """T1: meta 10, entrada 12, 3 entregas => saldo 9, comprar 1."""
        summary = {item.part_id: item for item in self.controller.stock_summary()}

        self.assertEqual(summary["T1"].balance, 9)
        self.assertEqual(summary["T1"].to_buy, 1)
        self.assertEqual(summary["T1"].situation, Situation.COMPRAR)
        self.assertEqual(
            [item.part_id for item in self.controller.stock_summary()],
            ["T1", "T2", "T10"],
        )

    def test_set_policy_uses_remaining_students(self) -> None:
        """Con alumnos restantes, la meta es total de alumnos menos entregas."""
        self.controller.set_policy("remaining_students")
        summary = {item.part_id: item for item in self.controller.stock_summary()}

        self.assertEqual(summary["T1"].target, 1)
        self.assertEqual(summary["T1"].situation, Situation.OK)
        self.assertEqual(summary["T10"].target, 4)

    def test_save_part_creates_and_persists(self) -> None:
        """Crear pieza debe actualizar estado y almacenamiento."""
        result = self.controller.save_part(
            PartDraft(id=" T5A ", code="1001583", name="Tarefa 5A", target_quantity=170)
        )

        self.assertTrue(result.ok)
        self.assertEqual(result.collections, ["parts"])
        self.assertIsNotNone(self.controller.find_part("T5A"))
        self.assertIn("T5A", [part.id for part in self.repository.get_parts()])

    def test_save_part_rejects_duplicate_and_missing_fields(self) -> None:
        """No debe crear piezas duplicadas ni incompletas."""
        with self.assertRaises(ValidationError):
            self.controller.save_part(PartDraft(id="T1", code="x", name="x", target_quantity=1))
        with self.assertRaises(ValidationError):
            self.controller.save_part(PartDraft(id="", code="x", name="", target_quantity=1))

    def test_edit_part_keeps_id(self) -> None:
        """Editar reemplaza la pieza con la misma tarefa."""
        result = self.controller.save_part(
            PartDraft(id="T2", code="999", name="Tarefa 2 rev", target_quantity=8),
            editing=True,
        )

        self.assertTrue(result.ok)
        part = self.controller.find_part("T2")
        self.assertEqual((part.code, part.name, part.target_quantity), ("999", "Tarefa 2 rev", 8))
        with self.assertRaises(ValidationError):
            self.controller.save_part(
                PartDraft(id="T99", code="1", name="x", target_quantity=1),
                editing=True,
            )

    def test_delete_part_cascades_withdrawals_in_one_write(self) -> None:
        """Eliminar pieza borra sus entregas en la misma escritura y conserva lancamientos."""
        with mock.patch.object(
            self.gateway,
            "save_collections",
            wraps=self.gateway.save_collections,
        ) as spy:
            result = self.controller.delete_part("T1")

        self.assertTrue(result.ok)
        spy.assert_called_once()
        self.assertEqual(result.collections, ["parts", "withdrawals"])
        self.assertIsNone(self.controller.find_part("T1"))
        self.assertFalse(any(w.part_id == "T1" for w in self.controller.withdrawals))
        self.assertFalse(any(w.part_id == "T1" for w in self.repository.get_withdrawals()))
        self.assertEqual(len(self.repository.get_withdrawals()), 1)
        self.assertEqual(len(self.repository.get_transactions()), 1)

    def test_failed_save_rolls_back_state(self) -> None:
        """Si persistir falla, el estado optimista se revierte y se informa el error."""
        parts_before = self.controller.parts
        withdrawals_before = self.controller.withdrawals

        with mock.patch.object(
            self.gateway,
            "save_collections",
            side_effect=ServiceError("sin conexion"),
        ):
            result = self.controller.delete_part("T1")

        self.assertFalse(result.ok)
        self.assertIn("sin conexion", result.message)
        self.assertEqual(self.controller.parts, parts_before)
        self.assertEqual(self.controller.withdrawals, withdrawals_before)
        self.assertIsNotNone(self.controller.find_part("T1"))

    def test_add_and_delete_transaction(self) -> None:
        """Registrar y estornar lancamientos actualiza saldos."""
        result = self.controller.add_transaction(
            TransactionDraft(
                date="2024-03-04",
                type="SAÍDA",
                description="Refugo",
                part_id="T1",
                quantity=4,
            )
        )

        self.assertTrue(result.ok)
        self.assertEqual(self.controller.transactions_newest_first()[0].id, "id1")
        summary = {item.part_id: item for item in self.controller.stock_summary()}
        self.assertEqual(summary["T1"].balance, 5)

        self.assertTrue(self.controller.delete_transaction("id1").ok)
        self.assertEqual([t.id for t in self.repository.get_transactions()], ["t1"])
        with self.assertRaises(ValidationError):
            self.controller.delete_transaction("id1")

    def test_add_transaction_rejects_unknown_type(self) -> None:
        """Tipo de lancamiento fuera de ENTRADA/SAÍDA debe rechazarse."""
        with self.assertRaises(ValidationError):
            self.controller.add_transaction(
                TransactionDraft(
                    date="2024-03-04",
                    type="AJUSTE",
                    description="",
                    part_id="T1",
                    quantity=1,
                )
            )

    def test_toggle_refused_without_balance(self) -> None:
        """Sin saldo no se puede entregar; el estado queda igual."""
        withdrawals_before = self.controller.withdrawals

        with self.assertRaises(ValidationError):
            self.controller.toggle_withdrawal("4", "T10")

        self.assertEqual(self.controller.withdrawals, withdrawals_before)

    def test_toggle_allowed_without_enforcement(self) -> None:
        """Con la regla de stock desactivada, se permite entregar con saldo 0."""
        controller = AppController(gateway=self.gateway, enforce_stock=False, clock=lambda: "now")
        controller.load_all()

        result = controller.toggle_withdrawal("4", "T10")

        self.assertTrue(result.ok)
        self.assertIn(
            StudentWithdrawal(student_id="4", part_id="T10", date="now"),
            self.repository.get_withdrawals(),
        )

    def test_double_toggle_restores_membership(self) -> None:
        """Entregar y desmarcar vuelve al estado original."""
        self.assertFalse(self.controller.is_withdrawn("4", "T1"))

        self.assertTrue(self.controller.toggle_withdrawal("4", "T1").ok)
        self.assertTrue(self.controller.is_withdrawn("4", "T1"))
        self.assertTrue(self.controller.toggle_withdrawal("4", "T1").ok)

        self.assertFalse(self.controller.is_withdrawn("4", "T1"))
        self.assertEqual(len(self.repository.get_withdrawals()), 4)

    def test_save_student_create_edit_and_delete(self) -> None:
        """Alta con ID generado, edicion de turma y baja."""
        result = self.controller.save_student(StudentDraft(name=" Davi ", class_name="turma b - tarde"))
        self.assertTrue(result.ok)
        created = [s for s in self.controller.students if s.id == "id1"][0]
        self.assertEqual((created.name, created.class_name), ("Davi", "Turma B - Tarde"))

        self.controller.save_student(
            StudentDraft(name="Davi", class_name="Turma A - Tarde"),
            student_id="id1",
        )
        self.assertEqual(
            [s.class_name for s in self.repository.get_students() if s.id == "id1"],
            ["Turma A - Tarde"],
        )

        self.assertTrue(self.controller.delete_student("id1").ok)
        self.assertNotIn("id1", [s.id for s in self.repository.get_students()])

    def test_save_student_rejects_invalid_class(self) -> None:
        """Turmas fuera del catalogo o nombres vacios deben rechazarse."""
        with self.assertRaises(ValidationError):
            self.controller.save_student(StudentDraft(name="Eva", class_name="Turma C"))
        with self.assertRaises(ValidationError):
            self.controller.save_student(StudentDraft(name=" ", class_name="Turma A - Manhã"))

    def test_students_in_class_filters_and_sorts(self) -> None:
        """Filtra por turma y busqueda; ordena ignorando acentos."""
        names = [s.name for s in self.controller.students_in_class("Turma A - Manhã")]
        self.assertEqual(names, ["Ana Souza", "Bruno Dias", "Óscar Lima"])

        searched = self.controller.students_in_class("Turma A - Manhã", search="LIMA")
        self.assertEqual([s.id for s in searched], ["1"])

    def test_dashboard_stats(self) -> None:
        """Indicadores del panel con los datos cargados."""
        stats = self.controller.dashboard_stats()

        self.assertEqual(stats.students, 4)
        self.assertEqual(stats.total_delivered, 4)
        self.assertEqual(stats.total_stock, 9 - 1 + 0)
        self.assertEqual(
            [item.part_id for item in self.controller.purchase_list()],
            ["T1", "T2", "T10"],
        )

    def test_export_stock_summary_writes_csv(self) -> None:
        """Exporta el resumen con el header canonico."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(self.controller.export_stock_summary(Path(temp_dir) / "out", "saldos.csv"))
            with path.open("r", newline="", encoding="utf-8") as csv_file:
                rows = list(csv.reader(csv_file))

        self.assertEqual(rows[0], list(SUMMARY_HEADERS))
        self.assertEqual(rows[1], ["T1", "1003198", "Tarefa 1", "10", "12", "0", "3", "9", "COMPRAR", "1"])
        self.assertEqual(len(rows), 4)


if __name__ == "__main__":
    unittest.main()
