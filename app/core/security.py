import base64
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Protocol

from jose import jwt, JWTError  # type: ignore
from loguru import logger

from .config import settings
from .exceptions import RandomSourceUnavailable


# --- FONTE DE ALEATORIEDADE ---
class SecureRandomSource(Protocol):
    def read(self, n: int) -> bytes: ...


class OsRandomSource:
    """Fonte padrão: o CSPRNG do sistema operativo (via secrets)."""

    def read(self, n: int) -> bytes:
        try:
            return secrets.token_bytes(n)
        except (OSError, NotImplementedError) as e:
            raise RandomSourceUnavailable(str(e)) from e


# --- EMISSÃO DE CÓDIGOS ---
@dataclass(frozen=True)
class IssuedCode:
    code: str
    issued_at: datetime
    expires_at: datetime


class CodeIssuer:
    """
    Gera códigos de autorização temporários: bytes do random source
    codificados em base64url sem padding (seguros numa query string).
    """

    def __init__(
        self,
        random_source: SecureRandomSource,
        *,
        num_bytes: int = settings.AUTH_CODE_BYTES,
        ttl_seconds: int = settings.AUTH_CODE_EXPIRE_SECONDS,
    ):
        self.random_source = random_source
        self.num_bytes = num_bytes
        self.ttl = timedelta(seconds=ttl_seconds)

    def issue(self) -> IssuedCode:
        # RandomSourceUnavailable propaga: o endpoint converte em server_error
        raw = self.random_source.read(self.num_bytes)
        if len(raw) < self.num_bytes:
            raise RandomSourceUnavailable(
                f"random source returned {len(raw)} of {self.num_bytes} bytes"
            )
        code = base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")
        now = datetime.now(timezone.utc)
        return IssuedCode(code=code, issued_at=now, expires_at=now + self.ttl)


# --- TOKEN DO PEDIDO PENDENTE (valor do cookie) ---
AUTH_REQUEST_TOKEN_TYPE = "authorization_request"


@dataclass(frozen=True)
class PendingAuthorization:
    code: str
    client_id: str
    state: str
    issued_at: datetime
    expires_at: datetime


def create_authorization_request_token(
    issued: IssuedCode, *, client_id: str, state: str
) -> str:
    """Assina o vínculo código/cliente/state que viaja no cookie temporário."""
    to_encode: Dict[str, Any] = {
        "jti": issued.code,
        "sub": client_id,
        "state": state,
        "iat": issued.issued_at,
        "exp": issued.expires_at,
        "token_type": AUTH_REQUEST_TOKEN_TYPE,
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_authorization_request_token(token: str) -> Optional[PendingAuthorization]:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            options={"verify_aud": False},
        )
    except JWTError as e:
        logger.warning(f"Falha ao decodificar token do pedido de autorização: {e}")
        return None

    if payload.get("token_type") != AUTH_REQUEST_TOKEN_TYPE:
        logger.warning("Token com tipo incorreto usado como pedido de autorização.")
        return None

    code = payload.get("jti")
    client_id = payload.get("sub")
    state = payload.get("state")
    if not code or not client_id or state is None or "iat" not in payload or "exp" not in payload:
        return None

    return PendingAuthorization(
        code=code,
        client_id=client_id,
        state=state,
        issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
