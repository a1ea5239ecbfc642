"""Tests para backends de almacenamiento de colecciones."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from servidor.storage.backends import (
    InMemoryStorage,
    JsonDocumentStorage,
    JsonKeyValueStorage,
    build_storage,
)
from shared.errors import StorageError


class InMemoryStorageTests(unittest.TestCase):
    """Valida lectura/escritura en memoria."""

    def test_read_returns_none_when_never_written(self) -> None:
        """Una coleccion nunca escrita retorna None."""
        self.assertIsNone(InMemoryStorage().read("parts"))

    def test_read_returns_copies(self) -> None:
        """Modificar lo leido no debe alterar lo almacenado."""
        storage = InMemoryStorage({"parts": [{"id": "T1"}]})
        items = storage.read("parts")
        items[0]["id"] = "T9"

        self.assertEqual(storage.read("parts"), [{"id": "T1"}])

    def test_unknown_collection_raises(self) -> None:
        """Colecciones fuera del catalogo deben rechazarse."""
        with self.assertRaises(StorageError):
            InMemoryStorage().write("orders", [])


class JsonKeyValueStorageTests(unittest.TestCase):
    """Valida almacenamiento de un archivo por clave."""

    def test_write_then_read_uses_prefixed_file(self) -> None:
        """Debe crear ``senai_<coleccion>.json`` y reemplazar la coleccion completa."""
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JsonKeyValueStorage(Path(temp_dir) / "storage")
            storage.write("students", [{"id": "1"}, {"id": "2"}])
            storage.write("students", [{"id": "3"}])

            path = Path(temp_dir) / "storage" / "senai_students.json"
            self.assertTrue(path.exists())
            self.assertEqual(storage.read("students"), [{"id": "3"}])
            self.assertEqual(list(path.parent.glob("*.tmp")), [])

    def test_invalid_json_raises_storage_error(self) -> None:
        """JSON corrupto o que no es lista debe levantar StorageError."""
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JsonKeyValueStorage(Path(temp_dir))
            storage.path_for("parts").write_text("{no-json", encoding="utf-8")
            storage.path_for("students").write_text('{"id": "1"}', encoding="utf-8")

            with self.assertRaises(StorageError):
                storage.read("parts")
            with self.assertRaises(StorageError):
                storage.read("students")

    def test_transact_restores_previous_content_on_failure(self) -> None:
        """Si falla un reemplazo, las colecciones ya reemplazadas vuelven a su estado previo."""
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JsonKeyValueStorage(Path(temp_dir))
            storage.write("parts", [{"id": "T1"}, {"id": "T2"}])
            storage.write("withdrawals", [{"studentId": "1", "partId": "T2"}])

            original_replace = Path.replace
            calls = {"count": 0}

            def failing_replace(self: Path, target: Path) -> Path:
                calls["count"] += 1
                if calls["count"] == 2:
                    raise OSError("disco lleno")
                return original_replace(self, target)

            with mock.patch.object(Path, "replace", failing_replace):
                with self.assertRaises(StorageError):
                    storage.transact({"parts": [{"id": "T1"}], "withdrawals": []})

            self.assertEqual(storage.read("parts"), [{"id": "T1"}, {"id": "T2"}])
            self.assertEqual(storage.read("withdrawals"), [{"studentId": "1", "partId": "T2"}])
            self.assertEqual(list(Path(temp_dir).glob("*.tmp")), [])


class JsonDocumentStorageTests(unittest.TestCase):
    """Valida almacenamiento en documento unico con ``storage/<coleccion>/items``."""

    def test_layout_and_roundtrip(self) -> None:
        """Cada coleccion se guarda como documento con arreglo ``items``."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "storage.json"
            storage = JsonDocumentStorage(path)
            storage.transact({"parts": [{"id": "T1"}], "withdrawals": []})

            data = json.loads(path.read_text(encoding="utf-8"))
            self.assertEqual(
                data,
                {"storage": {"parts": {"items": [{"id": "T1"}]}, "withdrawals": {"items": []}}},
            )
            self.assertEqual(storage.read("parts"), [{"id": "T1"}])
            self.assertEqual(storage.read("withdrawals"), [])
            self.assertIsNone(storage.read("students"))

    def test_write_keeps_other_collections(self) -> None:
        """Escribir una coleccion no debe borrar las demas."""
        with tempfile.TemporaryDirectory() as temp_dir:
            storage = JsonDocumentStorage(Path(temp_dir) / "storage.json")
            storage.write("parts", [{"id": "T1"}])
            storage.write("students", [{"id": "1"}])

            self.assertEqual(storage.read("parts"), [{"id": "T1"}])

    def test_invalid_items_raise(self) -> None:
        """``items`` que no es lista debe levantar StorageError."""
        with tempfile.TemporaryDirectory() as temp_dir:
            path = Path(temp_dir) / "storage.json"
            path.write_text('{"storage": {"parts": {"items": 3}}}', encoding="utf-8")

            with self.assertRaises(StorageError):
                JsonDocumentStorage(path).read("parts")


class BuildStorageTests(unittest.TestCase):
    """Valida la seleccion de backend por configuracion."""

    def test_known_backends(self) -> None:
        """Debe construir cada backend conocido y rechazar el resto."""
        base = Path("data")
        self.assertIsInstance(build_storage("json_keyvalue", base), JsonKeyValueStorage)
        self.assertIsInstance(build_storage(" JSON_DOCUMENT ", base), JsonDocumentStorage)
        self.assertIsInstance(build_storage("memory", base), InMemoryStorage)
        with self.assertRaises(StorageError):
            build_storage("sqlite", base)


if __name__ == "__main__":
    unittest.main()
