"""Gateway de comunicacion cliente-servidor."""

from __future__ import annotations

import logging
from typing import Protocol

from servidor.storage.repository import InventoryRepository
from shared.errors import ServiceError
from shared.protocol import LoadInventoryResponse, SaveCollectionsRequest

LOGGER = logging.getLogger(__name__)


class ServerGateway(Protocol):
    """Interfaz de acceso del cliente a servicios del servidor."""

    def load_inventory(self) -> LoadInventoryResponse:
        """Solicita las cuatro colecciones del inventario."""

    def save_collections(self, request: SaveCollectionsRequest) -> None:
        """Solicita reemplazar colecciones completas como una unidad."""


class LocalServerGateway:
    """Implementacion local del gateway usando el repositorio en proceso."""

    def __init__(self, repository: InventoryRepository) -> None:
        self._repository = repository

    def load_inventory(self) -> LoadInventoryResponse:
        """Carga todas las colecciones delegando en el repositorio."""
        try:
            response = LoadInventoryResponse(
                parts=self._repository.get_parts(),
                students=self._repository.get_students(),
                transactions=self._repository.get_transactions(),
                withdrawals=self._repository.get_withdrawals(),
            )
        except ServiceError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al cargar inventario.")
            raise ServiceError("No fue posible cargar los datos del inventario.") from exc

        return response

    def save_collections(self, request: SaveCollectionsRequest) -> None:
        """Persiste las colecciones informadas en una sola transaccion."""
        try:
            self._repository.transact(
                parts=request.parts,
                students=request.students,
                transactions=request.transactions,
                withdrawals=request.withdrawals,
            )
        except ServiceError:
            raise
        except Exception as exc:
            LOGGER.exception("Fallo inesperado al guardar colecciones.")
            raise ServiceError("No fue posible guardar en el almacenamiento.") from exc
