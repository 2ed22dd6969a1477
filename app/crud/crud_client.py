# auth_service/app/crud/crud_client.py
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from loguru import logger

from app.crud.base import CRUDBase
from app.models.client import Client
from app.schemas.client import ClientCreate, ClientUpdate


class CRUDClient(CRUDBase[Client, ClientCreate, ClientUpdate]):

    async def get_by_name(self, db: AsyncSession, *, name: str) -> Optional[Client]:
        """Procura um cliente ativo pelo nome (clientes apagados nunca são devolvidos)."""
        if not name:
            return None
        stmt = select(Client).where(Client.name == name, Client.deleted_at.is_(None))
        result = await db.execute(stmt)
        return result.scalars().first()

    async def upsert(self, db: AsyncSession, *, obj_in: ClientCreate) -> Client:
        """
        Cria o cliente ou, se o id já existir, atualiza nome, website,
        redirect_uri e logo. O estado de soft delete não é alterado.
        """
        db_obj = await self.get(db, id=obj_in.id)
        if db_obj is None:
            logger.info(f"Criando cliente '{obj_in.name}' (ID: {obj_in.id})")
            return await self.create(db, obj_in=obj_in)

        logger.info(f"Atualizando cliente '{obj_in.name}' (ID: {obj_in.id})")
        return await self.update(
            db,
            db_obj=db_obj,
            obj_in=obj_in.model_dump(include={"name", "website", "redirect_uri", "logo"}),
        )

    async def soft_delete(self, db: AsyncSession, *, db_obj: Client) -> Client:
        db_obj.deleted_at = datetime.now(timezone.utc).replace(tzinfo=None)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.info(f"Cliente (ID: {db_obj.id}) marcado como removido")
        return db_obj


client = CRUDClient(Client)
