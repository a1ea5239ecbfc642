"""Utilidades generales para registros de inventario."""

from __future__ import annotations

import unicodedata
import uuid
from datetime import datetime

ID_LENGTH = 9


def generate_id() -> str:
    """Genera un identificador corto para nuevos registros."""
    return uuid.uuid4().hex[:ID_LENGTH]


def now_iso() -> str:
    """Fecha y hora actuales en formato ISO 8601."""
    return datetime.now().isoformat(timespec="seconds")


def format_date(value: str) -> str:
    """Formatea una fecha ISO como dd/mm/aaaa; retorna el texto original si no es valida."""
    text = value.strip()
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return text
    return parsed.strftime("%d/%m/%Y")


def format_quantity(value: float) -> str:
    """Formatea cantidades sin decimales cuando son enteras."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_lookup_key(text: str) -> str:
    """Normaliza texto para comparaciones y ordenamiento sin acentos."""
    normalized = unicodedata.normalize("NFKD", text)
    ascii_text = normalized.encode("ascii", "ignore").decode("ascii")
    return ascii_text.casefold().strip()
