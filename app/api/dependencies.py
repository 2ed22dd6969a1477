# auth_service/app/api/dependencies.py
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.security import CodeIssuer, OsRandomSource, SecureRandomSource
from app.db.session import get_db
from app.services.authorization_service import AuthorizationService
from app.services.client_directory import ClientDirectory, SqlClientDirectory
from app.services.consent_renderer import ConsentRenderer
from app.services.pending_authorization import ConsumedCodeRegistry

# Uma única instância por processo; os templates são carregados uma vez
_consent_renderer = ConsentRenderer()
_os_random_source = OsRandomSource()


async def get_client_directory(db: AsyncSession = Depends(get_db)) -> ClientDirectory:
    return SqlClientDirectory(db)


def get_random_source() -> SecureRandomSource:
    return _os_random_source


def get_code_issuer(
    random_source: SecureRandomSource = Depends(get_random_source),
) -> CodeIssuer:
    return CodeIssuer(random_source)


def get_consumed_code_registry(request: Request) -> ConsumedCodeRegistry:
    """O registo vive no estado da aplicação (criado em main.py)."""
    return request.app.state.consumed_codes


def get_consent_renderer() -> ConsentRenderer:
    return _consent_renderer


async def get_authorization_service(
    directory: ClientDirectory = Depends(get_client_directory),
    code_issuer: CodeIssuer = Depends(get_code_issuer),
    consumed_codes: ConsumedCodeRegistry = Depends(get_consumed_code_registry),
) -> AuthorizationService:
    return AuthorizationService(directory, code_issuer, consumed_codes)
