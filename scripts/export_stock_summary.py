"""Exporta el resumen de saldos y compras a CSV desde el almacenamiento local."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Sequence

from parametros import (
    DEFAULT_SUMMARY_FILENAME,
    OUTPUT_DIR,
    STORAGE_BACKEND,
    STORAGE_DIR,
    TARGET_POLICY,
)
from servidor.services.stock_summary import TargetPolicy, build_stock_summary, purchase_list
from servidor.services.summary_export import write_summary_csv
from servidor.storage.backends import build_storage
from servidor.storage.repository import InventoryRepository
from shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)

BACKEND_CHOICES = ("json_keyvalue", "json_document")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parsea argumentos CLI de exportacion."""
    parser = argparse.ArgumentParser(
        description="Exporta el resumen de stock por tarefa (saldo, situacion y compra) a CSV."
    )
    parser.add_argument(
        "--storage-dir",
        type=Path,
        default=STORAGE_DIR,
        help="Directorio del almacenamiento JSON.",
    )
    parser.add_argument(
        "--backend",
        choices=BACKEND_CHOICES,
        default=STORAGE_BACKEND,
        help="Formato del almacenamiento a leer.",
    )
    parser.add_argument(
        "--policy",
        choices=[policy.value for policy in TargetPolicy],
        default=TARGET_POLICY,
        help="Base de la meta de compra.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=OUTPUT_DIR / DEFAULT_SUMMARY_FILENAME,
        help="Ruta del CSV a generar.",
    )
    parser.add_argument(
        "--only-purchases",
        action="store_true",
        help="Exporta solo tarefas con cantidad a comprar.",
    )
    return parser.parse_args(argv)


def configure_logging() -> None:
    """Configura logging para salida en consola."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )


def run_export(
    storage_dir: Path,
    output_path: Path,
    *,
    backend: str = STORAGE_BACKEND,
    policy: TargetPolicy | str = TARGET_POLICY,
    only_purchases: bool = False,
) -> int:
    """Carga colecciones, calcula el resumen y lo escribe; retorna codigo de salida."""
    repository = InventoryRepository(build_storage(backend, storage_dir))
    try:
        students = repository.get_students()
        summary = build_stock_summary(
            repository.get_parts(),
            repository.get_transactions(),
            repository.get_withdrawals(),
            total_students=len(students),
            policy=TargetPolicy.parse(policy),
        )
        if only_purchases:
            summary = purchase_list(summary)
        write_summary_csv(summary, output_path)
    except ServiceError:
        LOGGER.exception("Fallo exportando resumen de stock desde %s.", storage_dir)
        return 1

    LOGGER.info(
        "Resumen exportado: filas=%s, comprar=%s, destino=%s",
        len(summary),
        len(purchase_list(summary)),
        output_path,
    )
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Punto de entrada CLI."""
    configure_logging()
    args = parse_args(argv)
    return run_export(
        storage_dir=args.storage_dir,
        output_path=args.output,
        backend=args.backend,
        policy=args.policy,
        only_purchases=args.only_purchases,
    )


if __name__ == "__main__":
    raise SystemExit(main())
