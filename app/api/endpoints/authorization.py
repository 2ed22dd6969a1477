# auth_service/app/api/endpoints/authorization.py
from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from starlette.responses import Response

from app.core.config import settings
from app.schemas.authorization import AuthorizationRequest, ConfirmAuthRequest, OAuth2ErrorResponse
from app.services.authorization_service import AuthorizationService
from app.services.consent_renderer import ConsentRenderer
from app.api.dependencies import get_authorization_service, get_consent_renderer


router = APIRouter()


# --- Endpoint /auth (pedido de autorização + página de consentimento) ---
@router.get(
    "/auth",
    response_class=HTMLResponse,
    responses={
        200: {"description": "Página de consentimento; cookie temporário definido"},
        400: {"description": "invalid_request ou invalid_client", "model": OAuth2ErrorResponse},
        500: {"description": "server_error", "model": OAuth2ErrorResponse},
    },
)
async def authorize(
    request: Request,
    auth_request: AuthorizationRequest = Depends(),
    service: AuthorizationService = Depends(get_authorization_service),
    renderer: ConsentRenderer = Depends(get_consent_renderer),
) -> Response:
    consent = await service.start_authorization(auth_request)

    response = renderer.render(
        request,
        logo=consent.client.logo,
        name=consent.client.name,
        website=consent.client.website,
        state=consent.state,
        scopes=consent.scopes,
    )
    response.set_cookie(
        key=settings.TEMP_CODE_COOKIE_NAME,
        value=consent.carrier_token,
        max_age=settings.AUTH_CODE_EXPIRE_SECONDS,
        expires=consent.issued.expires_at,
        secure=settings.TEMP_CODE_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return response


# --- Endpoint /confirm_auth (decisão do utilizador) ---
@router.get(
    "/confirm_auth",
    status_code=status.HTTP_302_FOUND,
    response_class=RedirectResponse,
    responses={
        302: {"description": "Redirecionamento para o redirect_uri registado do cliente"},
        400: {"description": "invalid_request ou invalid_client", "model": OAuth2ErrorResponse},
    },
)
async def confirm_authorization(
    request: Request,
    decision: ConfirmAuthRequest = Depends(),
    service: AuthorizationService = Depends(get_authorization_service),
) -> Response:
    carrier_token = request.cookies.get(settings.TEMP_CODE_COOKIE_NAME)
    redirect_url = await service.confirm_authorization(carrier_token, decision)

    response = RedirectResponse(redirect_url, status_code=status.HTTP_302_FOUND)
    # Uso único: o cookie deixa de existir depois da primeira decisão
    response.delete_cookie(
        key=settings.TEMP_CODE_COOKIE_NAME,
        secure=settings.TEMP_CODE_COOKIE_SECURE,
        httponly=True,
        samesite="lax",
    )
    return response
