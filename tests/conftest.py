import os
# Settings obrigatórias antes de importar a app
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_DEFAULT_CLIENT"] = "false"

import pytest
from typing import AsyncGenerator, Dict, Optional
from unittest.mock import AsyncMock

from httpx import AsyncClient, ASGITransport

from sqlalchemy.exc import OperationalError
from sqlalchemy.pool import NullPool
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from app.db.base import Base
from main import app
from app.api.dependencies import get_db
from app.crud.crud_client import client as crud_client
from app.models.client import Client
from app.schemas.client import ClientCreate
from app.services.client_directory import SqlClientDirectory

# --- CONFIGURAÇÃO DO BANCO DE DADOS DE TESTE ---
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

FIBERS_CLIENT = {
    "id": "19",
    "name": "fibers",
    "website": "https://gofiber.io",
    "logo": "https://avatars.githubusercontent.com/u/40920169?s=200&v=4",
    "redirect_uri": "https://localhost:8080/callback",
}

@pytest.fixture(scope="session")
def async_engine():
    # NullPool: nenhuma ligação sobrevive entre event loops de testes diferentes
    engine = create_async_engine(TEST_DATABASE_URL, poolclass=NullPool)
    yield engine
    engine.sync_engine.dispose()
    try:
        os.remove("test.db")
    except (FileNotFoundError, PermissionError):
        print("Aviso: não foi possível remover 'test.db'. Pode estar em uso.")

@pytest.fixture(scope="session")
def test_session_local(async_engine):
    TestSessionLocal = async_sessionmaker(
        bind=async_engine,
        class_=AsyncSession,
        expire_on_commit=False
    )
    yield TestSessionLocal

@pytest.fixture(scope="function", autouse=True)
async def db_session(async_engine, test_session_local):
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with test_session_local() as session:
        yield session
        await session.close()

    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(scope="function")
async def fibers_client(db_session: AsyncSession) -> Client:
    """Cliente registado igual ao cliente de demonstração do serviço."""
    return await crud_client.create(db_session, obj_in=ClientCreate(**FIBERS_CLIENT))


class InMemoryClientDirectory:
    """Diretório de clientes falso, para testar o serviço sem base de dados."""

    def __init__(self, clients: Optional[Dict[str, Client]] = None):
        self.clients = clients or {}
        self.lookups = []

    async def lookup(self, identifier: str) -> Optional[Client]:
        self.lookups.append(identifier)
        return self.clients.get(identifier)


@pytest.fixture(scope="function")
def unavailable_client_directory() -> SqlClientDirectory:
    """Diretório SQL cuja sessão falha em todas as consultas (BD em baixo)."""
    session = AsyncMock(spec=AsyncSession)
    session.execute.side_effect = OperationalError("SELECT", {}, Exception("database is down"))
    return SqlClientDirectory(session)


# --- CONFIGURAÇÃO DO CLIENTE HTTP DE TESTE ---

@pytest.fixture(scope="function")
async def async_client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    # https: o cookie temporário é Secure e só volta a ser enviado por https
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as client:
        yield client

    app.dependency_overrides.pop(get_db, None)
