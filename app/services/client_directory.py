# auth_service/app/services/client_directory.py
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from app.core.exceptions import ServerError
from app.crud.crud_client import client as crud_client
from app.models.client import Client


class ClientDirectory(Protocol):
    async def lookup(self, identifier: str) -> Optional[Client]: ...


class SqlClientDirectory:
    """Diretório de clientes sobre a tabela 'clients' (só leitura)."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def lookup(self, identifier: str) -> Optional[Client]:
        try:
            return await crud_client.get_by_name(self.db, name=identifier)
        except SQLAlchemyError as e:
            # Falha da base de dados: server_error, nunca invalid_client
            logger.error(f"Erro ao consultar o cliente '{identifier}' na BD: {e}")
            raise ServerError("client directory unavailable") from e
