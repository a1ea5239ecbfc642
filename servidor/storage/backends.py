"""Backends intercambiables de almacenamiento de colecciones completas."""

from __future__ import annotations

import copy
import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

from parametros import DOCUMENT_FILENAME, STORAGE_KEY_PREFIX
from shared.errors import StorageError

LOGGER = logging.getLogger(__name__)

COLLECTIONS: tuple[str, ...] = ("parts", "students", "transactions", "withdrawals")

Records = list[dict[str, Any]]


class StorageBackend(Protocol):
    """Interfaz comun: lectura y sobreescritura de colecciones completas."""

    def read(self, collection: str) -> Records | None:
        """Retorna la coleccion o None si nunca fue escrita."""

    def write(self, collection: str, items: Records) -> None:
        """Reemplaza la coleccion completa."""

    def transact(self, changes: Mapping[str, Records]) -> None:
        """Reemplaza varias colecciones como una unidad (todas o ninguna)."""


def _ensure_known_collection(collection: str) -> None:
    if collection not in COLLECTIONS:
        raise StorageError(f"Coleccion desconocida: {collection}")


def _serialize(data: Any) -> str:
    return json.dumps(data, ensure_ascii=False, indent=2) + "\n"


class InMemoryStorage:
    """Almacenamiento en memoria; util para pruebas y sesiones temporales."""

    def __init__(self, initial: Mapping[str, Records] | None = None) -> None:
        self._data: dict[str, Records] = {}
        for collection, items in (initial or {}).items():
            _ensure_known_collection(collection)
            self._data[collection] = copy.deepcopy(list(items))

    def read(self, collection: str) -> Records | None:
        _ensure_known_collection(collection)
        items = self._data.get(collection)
        return None if items is None else copy.deepcopy(items)

    def write(self, collection: str, items: Records) -> None:
        self.transact({collection: items})

    def transact(self, changes: Mapping[str, Records]) -> None:
        for collection in changes:
            _ensure_known_collection(collection)
        staged = {collection: copy.deepcopy(list(items)) for collection, items in changes.items()}
        self._data.update(staged)


class JsonKeyValueStorage:
    """Un archivo JSON por clave fija (``senai_parts.json``, ``senai_students.json``...)."""

    def __init__(self, storage_dir: Path, key_prefix: str = STORAGE_KEY_PREFIX) -> None:
        self._storage_dir = storage_dir
        self._key_prefix = key_prefix

    def path_for(self, collection: str) -> Path:
        """Ruta del archivo asociado a una coleccion."""
        _ensure_known_collection(collection)
        return self._storage_dir / f"{self._key_prefix}{collection}.json"

    def read(self, collection: str) -> Records | None:
        path = self.path_for(collection)
        if not path.exists():
            return None

        try:
            raw_text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(f"No fue posible leer la coleccion: {path}") from exc

        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Formato JSON invalido en: {path}") from exc

        if not isinstance(data, list):
            raise StorageError(f"La coleccion debe ser una lista JSON: {path}")
        return data

    def write(self, collection: str, items: Records) -> None:
        self.transact({collection: items})

    def transact(self, changes: Mapping[str, Records]) -> None:
        """Escribe temporales y luego reemplaza; si un reemplazo falla, restaura lo previo."""
        targets = [(self.path_for(collection), items) for collection, items in changes.items()]

        try:
            self._storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StorageError(
                f"No fue posible crear directorio de almacenamiento: {self._storage_dir}"
            ) from exc

        staged: list[tuple[Path, Path]] = []
        try:
            for path, items in targets:
                temp_path = path.with_name(f"{path.name}.tmp")
                temp_path.write_text(_serialize(list(items)), encoding="utf-8")
                staged.append((path, temp_path))
        except OSError as exc:
            self._discard_temp_files(staged)
            raise StorageError("No fue posible preparar la escritura de colecciones.") from exc

        previous: dict[Path, str | None] = {}
        try:
            for path, _ in staged:
                previous[path] = path.read_text(encoding="utf-8") if path.exists() else None
        except OSError as exc:
            self._discard_temp_files(staged)
            raise StorageError("No fue posible respaldar colecciones antes de escribir.") from exc

        replaced: list[Path] = []
        try:
            for path, temp_path in staged:
                temp_path.replace(path)
                replaced.append(path)
        except OSError as exc:
            self._restore(replaced, previous)
            self._discard_temp_files(staged)
            raise StorageError("No fue posible persistir colecciones.") from exc

    @staticmethod
    def _restore(replaced: list[Path], previous: Mapping[Path, str | None]) -> None:
        for path in replaced:
            previous_text = previous.get(path)
            try:
                if previous_text is None:
                    path.unlink(missing_ok=True)
                else:
                    path.write_text(previous_text, encoding="utf-8")
            except OSError:
                LOGGER.exception("No fue posible restaurar contenido previo de: %s", path)
                continue
            LOGGER.warning("Contenido previo restaurado tras fallo de escritura: %s", path)

    @staticmethod
    def _discard_temp_files(staged: list[tuple[Path, Path]]) -> None:
        for _, temp_path in staged:
            temp_path.unlink(missing_ok=True)


class JsonDocumentStorage:
    """Un unico archivo con la coleccion ``storage`` y un documento con ``items`` por coleccion."""

    ROOT_COLLECTION = "storage"
    ITEMS_FIELD = "items"

    def __init__(self, document_path: Path) -> None:
        self._document_path = document_path

    @property
    def document_path(self) -> Path:
        return self._document_path

    def read(self, collection: str) -> Records | None:
        _ensure_known_collection(collection)
        documents = self._read_documents()
        document = documents.get(collection)
        if document is None:
            return None

        if not isinstance(document, dict):
            raise StorageError(f"Documento invalido para la coleccion: {collection}")
        items = document.get(self.ITEMS_FIELD)
        if items is None:
            return None
        if not isinstance(items, list):
            raise StorageError(f"'{self.ITEMS_FIELD}' debe ser una lista en: {collection}")
        return items

    def write(self, collection: str, items: Records) -> None:
        self.transact({collection: items})

    def transact(self, changes: Mapping[str, Records]) -> None:
        """Todas las colecciones viven en un archivo, asi que un solo replace es atomico."""
        for collection in changes:
            _ensure_known_collection(collection)

        documents = self._read_documents()
        for collection, items in changes.items():
            documents[collection] = {self.ITEMS_FIELD: list(items)}

        temp_path = self._document_path.with_name(f"{self._document_path.name}.tmp")
        try:
            self._document_path.parent.mkdir(parents=True, exist_ok=True)
            temp_path.write_text(
                _serialize({self.ROOT_COLLECTION: documents}),
                encoding="utf-8",
            )
            temp_path.replace(self._document_path)
        except OSError as exc:
            temp_path.unlink(missing_ok=True)
            raise StorageError(
                f"No fue posible persistir documento de almacenamiento: {self._document_path}"
            ) from exc

    def _read_documents(self) -> dict[str, Any]:
        if not self._document_path.exists():
            return {}

        try:
            raw_text = self._document_path.read_text(encoding="utf-8")
        except OSError as exc:
            raise StorageError(
                f"No fue posible leer documento de almacenamiento: {self._document_path}"
            ) from exc

        try:
            data = json.loads(raw_text)
        except json.JSONDecodeError as exc:
            raise StorageError(f"Formato JSON invalido en: {self._document_path}") from exc

        if not isinstance(data, dict):
            raise StorageError(f"El documento debe ser un objeto JSON: {self._document_path}")

        documents = data.get(self.ROOT_COLLECTION, {})
        if not isinstance(documents, dict):
            raise StorageError(
                f"'{self.ROOT_COLLECTION}' debe ser un objeto en: {self._document_path}"
            )
        return dict(documents)


def build_storage(
    backend: str,
    storage_dir: Path,
    key_prefix: str = STORAGE_KEY_PREFIX,
    document_filename: str = DOCUMENT_FILENAME,
) -> StorageBackend:
    """Construye el backend configurado."""
    normalized = backend.strip().lower()
    if normalized == "json_keyvalue":
        return JsonKeyValueStorage(storage_dir, key_prefix=key_prefix)
    if normalized == "json_document":
        return JsonDocumentStorage(storage_dir / document_filename)
    if normalized == "memory":
        return InMemoryStorage()

    raise StorageError(f"Backend de almacenamiento desconocido: {backend}")
