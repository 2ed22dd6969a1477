# auth_service/main.py
import sys
import time

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from loguru import logger

# --- Imports slowapi (Rate Limiting) ---
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

# --- Imports da Aplicação ---
from app.api.endpoints import authorization
from app.core.config import settings
from app.core.exceptions import OAuth2Error, InvalidRequestError
from app.db.session import dispose_engine, get_async_engine, get_session_factory
from app.db.initial_data import create_tables, seed_default_client
from app.services.pending_authorization import ConsumedCodeRegistry
from app.models import client  # noqa - Registar o modelo em Base.metadata

# --- Logging (loguru) ---
logger.remove()
logger.add(sys.stderr, level=settings.LOG_LEVEL)

# --- Configuração do FastAPI ---
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
    enabled=settings.RATE_LIMIT_ENABLED,
)

app = FastAPI(
    title=settings.APP_NAME,
    description="Emissão de códigos de autorização OAuth2 (fluxo authorization code)",
    version="1.0.0",
)

app.state.limiter = limiter
# Códigos já consumidos em /confirm_auth (uso único)
app.state.consumed_codes = ConsumedCodeRegistry()
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Handlers de Erro ---
@app.exception_handler(OAuth2Error)
async def oauth2_error_handler(request: Request, exc: OAuth2Error) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} -> {exc.error}: {exc.reason or '-'}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.error})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Parâmetros que não podem ser interpretados são um pedido inválido
    return await oauth2_error_handler(request, InvalidRequestError(str(exc.errors())))


# --- Middleware de Log dos pedidos ---
@app.middleware("http")
async def log_requests(request: Request, call_next):
    start = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info(f"{request.method} {request.url.path} {response.status_code} {elapsed_ms:.1f}ms")
    return response


# --- Registrar Roteadores ---
app.include_router(authorization.router, tags=["Authorization"])


# --- Eventos de Startup/Shutdown e Rota Raiz ---
@app.on_event("startup")
async def startup_event():
    await create_tables(get_async_engine())
    if settings.SEED_DEFAULT_CLIENT:
        async with get_session_factory()() as db:
            await seed_default_client(db)

@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down: Disposing database engine...")
    await dispose_engine()
    logger.info("Database engine disposed.")

@app.get("/")
def read_root():
    return {"message": "hello from server!"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
