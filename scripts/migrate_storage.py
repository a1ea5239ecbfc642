"""Copia las colecciones del inventario entre formatos de almacenamiento JSON."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from parametros import STORAGE_DIR
from servidor.storage.backends import COLLECTIONS, build_storage
from shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)

BACKEND_CHOICES = ("json_keyvalue", "json_document")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parsea argumentos CLI para ejecutar dry-run o migracion."""
    parser = argparse.ArgumentParser(
        description=(
            "Copia parts, students, transactions y withdrawals de un formato de "
            "almacenamiento a otro en una sola escritura."
        )
    )
    parser.add_argument("--source-backend", choices=BACKEND_CHOICES, required=True)
    parser.add_argument("--target-backend", choices=BACKEND_CHOICES, required=True)
    parser.add_argument("--source-dir", type=Path, default=STORAGE_DIR)
    parser.add_argument(
        "--target-dir",
        type=Path,
        default=None,
        help="Directorio destino (por defecto, el mismo que el origen).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Muestra que se copiaria sin escribir archivos.",
    )
    return parser.parse_args(argv)


def configure_logging() -> None:
    """Configura logging para salida en consola."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def run_migration(
    source_backend: str,
    source_dir: Path,
    target_backend: str,
    target_dir: Path,
    *,
    dry_run: bool,
) -> int:
    """Lee todas las colecciones del origen y las escribe juntas en el destino."""
    if source_backend == target_backend and source_dir.resolve() == target_dir.resolve():
        LOGGER.error("Origen y destino son el mismo almacenamiento.")
        return 1

    source = build_storage(source_backend, source_dir)
    target = build_storage(target_backend, target_dir)

    try:
        changes = {}
        for collection in COLLECTIONS:
            items = source.read(collection)
            if items is None:
                LOGGER.info("Coleccion sin datos en origen, se omite: %s", collection)
                continue
            changes[collection] = items
    except ServiceError:
        LOGGER.exception("Fallo leyendo almacenamiento origen en %s.", source_dir)
        return 1

    summary = ", ".join(f"{name}={len(items)}" for name, items in changes.items()) or "-"
    if dry_run:
        LOGGER.info(
            "DRY-RUN %s:%s -> %s:%s | %s",
            source_backend,
            source_dir,
            target_backend,
            target_dir,
            summary,
        )
        return 0

    if not changes:
        LOGGER.warning("No hay colecciones para migrar en %s.", source_dir)
        return 0

    try:
        target.transact(changes)
    except ServiceError:
        LOGGER.exception("Fallo escribiendo almacenamiento destino en %s.", target_dir)
        return 1

    LOGGER.info(
        "MIGRATE %s:%s -> %s:%s | %s",
        source_backend,
        source_dir,
        target_backend,
        target_dir,
        summary,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Punto de entrada CLI."""
    configure_logging()
    args = parse_args(argv)
    return run_migration(
        source_backend=args.source_backend,
        source_dir=args.source_dir,
        target_backend=args.target_backend,
        target_dir=args.target_dir or args.source_dir,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":
    raise SystemExit(main())
