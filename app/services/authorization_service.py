# auth_service/app/services/authorization_service.py
from dataclasses import dataclass
from typing import Dict, List, Optional
from urllib.parse import urlencode, urlsplit, urlunsplit

from loguru import logger

from app.core.exceptions import (
    InvalidClientError,
    InvalidRequestError,
    RandomSourceUnavailable,
    ServerError,
)
from app.core.security import (
    CodeIssuer,
    IssuedCode,
    create_authorization_request_token,
    decode_authorization_request_token,
)
from app.models.client import Client
from app.schemas.authorization import AuthorizationRequest, ConfirmAuthRequest
from app.services.client_directory import ClientDirectory
from app.services.pending_authorization import ConsumedCodeRegistry


def validate_authorization_request(auth_request: AuthorizationRequest) -> AuthorizationRequest:
    """
    Aplica as regras do pedido de autorização pela ordem abaixo. A primeira
    regra que falhar termina a validação com invalid_request.
    """
    if auth_request.response_type != "code":
        raise InvalidRequestError("response_type must be 'code'")
    if not auth_request.client_id:
        raise InvalidRequestError("client_id is required")
    # Verificação mínima; o redirecionamento usa sempre o URI registado do cliente
    if "https" not in auth_request.redirect_uri:
        raise InvalidRequestError("redirect_uri must use https")
    if not auth_request.scope:
        raise InvalidRequestError("scope is required")
    if not auth_request.state:
        raise InvalidRequestError("state is required")
    return auth_request


def build_redirect_uri(base_uri: str, params: Dict[str, str]) -> str:
    """Junta os parâmetros à query do URI registado, antes de qualquer fragmento."""
    scheme, netloc, path, query, fragment = urlsplit(base_uri)
    extra = urlencode(params)
    query = f"{query}&{extra}" if query else extra
    return urlunsplit((scheme, netloc, path, query, fragment))


@dataclass(frozen=True)
class ConsentRequest:
    """Resultado de /auth: o que a página de consentimento mostra e o valor do cookie."""
    client: Client
    scopes: List[str]
    state: str
    carrier_token: str
    issued: IssuedCode


class AuthorizationService:

    def __init__(
        self,
        directory: ClientDirectory,
        code_issuer: CodeIssuer,
        consumed_codes: ConsumedCodeRegistry,
    ):
        self.directory = directory
        self.code_issuer = code_issuer
        self.consumed_codes = consumed_codes

    async def _resolve_client(self, identifier: str) -> Client:
        client = await self.directory.lookup(identifier)
        if client is None:
            raise InvalidClientError(f"unknown client '{identifier}'")
        return client

    async def start_authorization(self, auth_request: AuthorizationRequest) -> ConsentRequest:
        validate_authorization_request(auth_request)
        client = await self._resolve_client(auth_request.client_id)

        try:
            issued = self.code_issuer.issue()
        except RandomSourceUnavailable as e:
            logger.error(f"Falha ao gerar código de autorização: {e}")
            raise ServerError("random source unavailable") from e

        carrier_token = create_authorization_request_token(
            issued, client_id=client.name, state=auth_request.state
        )
        logger.info(f"Pedido de autorização pendente criado para o cliente '{client.name}'")
        return ConsentRequest(
            client=client,
            scopes=auth_request.scopes,
            state=auth_request.state,
            carrier_token=carrier_token,
            issued=issued,
        )

    async def confirm_authorization(
        self, carrier_token: Optional[str], decision: ConfirmAuthRequest
    ) -> str:
        """
        Consome o pedido pendente e devolve o URL de redirecionamento:
        com o código (aprovado) ou com error=access_denied (negado).
        """
        if not carrier_token:
            raise InvalidRequestError("missing pending authorization cookie")

        pending = decode_authorization_request_token(carrier_token)
        if pending is None:
            raise InvalidRequestError("pending authorization is invalid or expired")

        client = await self._resolve_client(decision.client_id)

        if pending.client_id != client.name or pending.state != decision.state:
            raise InvalidRequestError("decision does not match the pending authorization")

        if not await self.consumed_codes.consume(pending.code, pending.expires_at):
            logger.warning(f"Replay de pedido de autorização recusado para o cliente '{client.name}'")
            raise InvalidRequestError("pending authorization already used")

        if not decision.authorize:
            logger.info(f"Autorização negada pelo utilizador para o cliente '{client.name}'")
            return build_redirect_uri(
                client.redirect_uri, {"error": "access_denied", "state": decision.state}
            )

        logger.info(f"Autorização aprovada para o cliente '{client.name}'")
        return build_redirect_uri(
            client.redirect_uri, {"code": pending.code, "state": decision.state}
        )
