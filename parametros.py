"""Parametros globales del proyecto."""

from __future__ import annotations

import logging
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent
DATA_DIR = BASE_DIR / "data"
STORAGE_DIR = DATA_DIR / "storage"
OUTPUT_DIR = DATA_DIR / "output"

# "json_keyvalue" | "json_document" | "memory"
STORAGE_BACKEND = "json_keyvalue"
STORAGE_KEY_PREFIX = "senai_"
DOCUMENT_FILENAME = "storage.json"

# "fixed_target" | "remaining_students"
TARGET_POLICY = "fixed_target"
ENFORCE_STOCK_ON_WITHDRAWAL = True
CRITICAL_STOCK_RATIO = 0.1
DASHBOARD_TOP_PURCHASES = 3

DEFAULT_SUMMARY_FILENAME = "saldos.csv"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)
