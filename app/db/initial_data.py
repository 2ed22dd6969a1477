# auth_service/app/db/initial_data.py
import asyncio
import logging
import sys  # Importar sys para checar plataforma

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from app.core.config import settings
from app.crud.crud_client import client as crud_client
from app.db.base import Base
from app.db.session import get_async_engine, get_session_factory, dispose_engine
from app.models.client import Client
from app.schemas.client import ClientCreate

logger = logging.getLogger(__name__)


def default_client_in() -> ClientCreate:
    return ClientCreate(
        id=settings.DEFAULT_CLIENT_ID,
        name=settings.DEFAULT_CLIENT_NAME,
        website=settings.DEFAULT_CLIENT_WEBSITE,
        logo=settings.DEFAULT_CLIENT_LOGO,
        redirect_uri=settings.DEFAULT_CLIENT_REDIRECT_URI,
    )


async def create_tables(engine: AsyncEngine) -> None:
    """Cria as tabelas em falta (não apaga nada)."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def seed_default_client(db: AsyncSession) -> Client:
    """Insere ou atualiza o cliente de demonstração definido nas settings."""
    db_client = await crud_client.upsert(db, obj_in=default_client_in())
    logger.info(f"Cliente de demonstração disponível: '{db_client.name}' -> {db_client.redirect_uri}")
    return db_client


async def init_db() -> None:
    logger.info("Iniciando a recriação do banco de dados (DROP ALL / CREATE ALL)...")
    engine = get_async_engine()
    async with engine.begin() as conn:
        logger.info("Removendo todas as tabelas existentes (se houver)...")
        await conn.run_sync(Base.metadata.drop_all)
        logger.info("Tabelas removidas.")

    logger.info("Criando todas as tabelas definidas nos modelos...")
    await create_tables(engine)
    logger.info("Tabelas criadas com sucesso.")

    async with get_session_factory()() as db:
        await seed_default_client(db)

    logger.info("Processo de inicialização do banco de dados concluído.")
    await dispose_engine()


async def main() -> None:
    await init_db()


if __name__ == "__main__":
    # Configuração básica de logging (só quando corre como script)
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s"
    )

    # Define a política de loop de eventos do asyncio (importante no Windows)
    if sys.platform == "win32":
        asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())  # type: ignore [attr-defined]

    try:
        asyncio.run(main())
    except Exception as e:
        logger.error(f"Ocorreu um erro durante a inicialização do banco de dados: {e}")
        import traceback

        logger.error(traceback.format_exc())
        sys.exit(1)
