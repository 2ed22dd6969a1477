# auth_service/app/core/exceptions.py
from fastapi import status


class OAuth2Error(Exception):
    """
    Erro do fluxo de autorização, devolvido ao chamador como
    {"error": <error>} com o status HTTP correspondente.
    """
    error: str = "server_error"
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, reason: str | None = None):
        # 'reason' fica apenas nos logs, nunca no corpo da resposta
        self.reason = reason
        super().__init__(reason or self.error)


class InvalidRequestError(OAuth2Error):
    error = "invalid_request"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidClientError(OAuth2Error):
    error = "invalid_client"
    status_code = status.HTTP_400_BAD_REQUEST


class ServerError(OAuth2Error):
    error = "server_error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class RandomSourceUnavailable(Exception):
    """A fonte de aleatoriedade criptográfica não conseguiu fornecer bytes."""
    pass
