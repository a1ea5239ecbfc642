"""Esquema canonico de columnas CSV para exportar saldos."""

from __future__ import annotations

SUMMARY_HEADERS: tuple[str, ...] = (
    "Tarefa",
    "Código",
    "Nome",
    "Meta",
    "Entradas",
    "Saídas",
    "Entregas Alunos",
    "Saldo",
    "Situação",
    "Comprar",
)
