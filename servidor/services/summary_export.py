"""Servicio para exportar el resumen de stock a CSV."""

from __future__ import annotations

import csv
import logging
from collections.abc import Iterable
from pathlib import Path

from servidor.domain.models import StockSummary
from servidor.services.inventory_utils import format_quantity
from shared.csv_schema import SUMMARY_HEADERS
from shared.errors import ServiceError

LOGGER = logging.getLogger(__name__)


def build_summary_row(item: StockSummary) -> list[str]:
    """Convierte un item del resumen en fila CSV segun SUMMARY_HEADERS."""
    return [
        item.part_id,
        item.code,
        item.name,
        format_quantity(item.target),
        format_quantity(item.entries),
        format_quantity(item.exits),
        str(item.student_exits),
        format_quantity(item.balance),
        item.situation.value,
        format_quantity(item.to_buy),
    ]


def write_summary_csv(summary: Iterable[StockSummary], output_path: Path) -> Path:
    """Escribe el resumen en ``output_path`` (temp + replace) y retorna la ruta."""
    if output_path.exists() and output_path.is_dir():
        raise ServiceError(f"La ruta de salida es un directorio: {output_path}")

    temp_path = output_path.with_name(f"{output_path.name}.tmp")
    rows = [build_summary_row(item) for item in summary]
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        with temp_path.open("w", newline="", encoding="utf-8") as csv_file:
            writer = csv.writer(csv_file)
            writer.writerow(SUMMARY_HEADERS)
            writer.writerows(rows)
        temp_path.replace(output_path)
    except OSError as exc:
        temp_path.unlink(missing_ok=True)
        raise ServiceError(f"No fue posible escribir el resumen de stock: {output_path}") from exc

    LOGGER.info("Resumen de stock exportado (%s filas): %s", len(rows), output_path)
    return output_path
