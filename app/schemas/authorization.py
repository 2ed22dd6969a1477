# auth_service/app/schemas/authorization.py
from pydantic import BaseModel
from typing import List, Literal

class AuthorizationRequest(BaseModel):
    """Parâmetros de GET /auth. Todos opcionais aqui; a validação é feita à mão, por ordem."""
    response_type: str = ""
    client_id: str = ""
    redirect_uri: str = ""
    scope: str = ""
    state: str = ""

    @property
    def scopes(self) -> List[str]:
        return self.scope.split()

class ConfirmAuthRequest(BaseModel):
    """Decisão do utilizador enviada para GET /confirm_auth."""
    authorize: bool = False
    state: str = ""
    client_id: str = ""

class OAuth2ErrorResponse(BaseModel):
    error: Literal["invalid_request", "invalid_client", "server_error"]
