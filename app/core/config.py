# auth_service/app/core/config.py
import logging
from typing import List
from pydantic_settings import BaseSettings
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent.parent
ENV_FILE_PATH = BASE_DIR / ".env"

class Settings(BaseSettings):

    # Core
    DATABASE_URL: str
    SECRET_KEY: str
    ALGORITHM: str = "HS256"

    # Código de autorização temporário
    AUTH_CODE_EXPIRE_SECONDS: int = 60
    AUTH_CODE_BYTES: int = 32 # Bytes aleatórios por código (32 -> 43 caracteres base64url)

    # Cookie que transporta o pedido pendente entre /auth e /confirm_auth
    TEMP_CODE_COOKIE_NAME: str = "temp_auth_request_code"
    TEMP_CODE_COOKIE_SECURE: bool = True

    # Rate Limiting (slowapi)
    RATE_LIMIT_ENABLED: bool = True
    RATE_LIMIT_DEFAULT: str = "10/minute"

    # CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "https://localhost:8080",
    ]

    # Cliente de demonstração inserido no arranque
    SEED_DEFAULT_CLIENT: bool = True
    DEFAULT_CLIENT_ID: str = "19"
    DEFAULT_CLIENT_NAME: str = "fibers"
    DEFAULT_CLIENT_WEBSITE: str = "https://gofiber.io"
    DEFAULT_CLIENT_LOGO: str = "https://avatars.githubusercontent.com/u/40920169?s=200&v=4"
    DEFAULT_CLIENT_REDIRECT_URI: str = "https://localhost:8080/callback"

    # Servidor
    APP_NAME: str = "Authorization Service"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    class Config:
        case_sensitive = True
        env_file = ENV_FILE_PATH
        env_file_encoding = 'utf-8'

try:
    settings = Settings()

    # Um código que expira antes de o utilizador conseguir decidir não serve para nada
    if settings.AUTH_CODE_EXPIRE_SECONDS <= 0:
        logging.warning(
            f"AUTH_CODE_EXPIRE_SECONDS ({settings.AUTH_CODE_EXPIRE_SECONDS}) deve ser positivo. "
            f"Os pedidos de autorização vão expirar imediatamente."
        )

except Exception as e:
    logging.error(f"FATAL: Erro ao carregar 'settings' a partir do .env em {ENV_FILE_PATH}: {e}")
    raise e
