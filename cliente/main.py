"""Inicializacion de la aplicacion de cliente."""

from __future__ import annotations

import logging
import sys

from PyQt6.QtWidgets import QApplication

from cliente.backend.controller import AppController
from cliente.backend.gateway import LocalServerGateway
from cliente.frontend.main_window import MainWindow
from parametros import STORAGE_BACKEND, STORAGE_DIR
from servidor.storage.backends import build_storage
from servidor.storage.repository import InventoryRepository

LOGGER = logging.getLogger(__name__)


def main() -> int:
    """Ejecuta la aplicacion grafica."""
    app = QApplication(sys.argv)

    storage = build_storage(STORAGE_BACKEND, STORAGE_DIR)
    LOGGER.info("Almacenamiento inicializado: backend=%s, dir=%s", STORAGE_BACKEND, STORAGE_DIR)

    gateway = LocalServerGateway(repository=InventoryRepository(storage))
    controller = AppController(gateway=gateway)
    controller.load_all()

    window = MainWindow(controller=controller)
    window.showMaximized()

    LOGGER.info("Aplicacion iniciada.")
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
