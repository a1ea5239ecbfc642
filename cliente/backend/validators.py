"""Validaciones para entradas del cliente."""

from __future__ import annotations

from pathlib import Path

from servidor.domain.models import TransactionType
from shared.catalog import resolve_class_name
from shared.errors import ValidationError
from shared.protocol import PartDraft, StudentDraft, TransactionDraft


def validate_output_dir(path: Path) -> None:
    """Valida que la ruta de salida sea utilizable para archivos CSV."""
    if path.exists() and not path.is_dir():
        raise ValidationError(f"La ruta no es un directorio: {path}")

    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ValidationError(f"No se pudo crear/acceder al directorio: {path}") from exc


def validate_part_draft(data: PartDraft) -> None:
    """Valida los campos minimos de una pieza."""
    missing_fields: list[str] = []
    if not data.id.strip():
        missing_fields.append("Tarefa")
    if not data.code.strip():
        missing_fields.append("Código")
    if not data.name.strip():
        missing_fields.append("Nome")

    if missing_fields:
        raise ValidationError("Completa los campos obligatorios: " + ", ".join(missing_fields))


def validate_student_draft(data: StudentDraft) -> str:
    """Valida un alumno y retorna la turma canonica del catalogo."""
    if not data.name.strip():
        raise ValidationError("El nombre del alumno no puede estar vacio.")

    class_name = resolve_class_name(data.class_name)
    if class_name is None:
        raise ValidationError(f"Turma invalida: {data.class_name}")
    return class_name


def validate_transaction_draft(data: TransactionDraft) -> TransactionType:
    """Valida un lancamiento y retorna su tipo.

    La cantidad no se limita: valores negativos o cero se registran tal cual.
    """
    missing_fields: list[str] = []
    if not data.date.strip():
        missing_fields.append("Data")
    if not data.part_id.strip():
        missing_fields.append("Tarefa")
    if missing_fields:
        raise ValidationError("Completa los campos obligatorios: " + ", ".join(missing_fields))

    try:
        return TransactionType(data.type)
    except ValueError as exc:
        raise ValidationError(f"Tipo de lancamiento invalido: {data.type}") from exc
