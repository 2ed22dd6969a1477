# auth_service/app/models/client.py
from sqlalchemy import String, Text, DateTime, func
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from typing import Optional

from app.db.base import Base

class Client(Base):
    """
    Aplicação cliente registada que pode pedir códigos de autorização.
    Registo e edição acontecem fora deste serviço; aqui só é lida.
    """
    __tablename__ = "clients"

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    # O 'client_id' recebido em /auth e /confirm_auth é comparado com este nome
    name: Mapped[str] = mapped_column(String(120), unique=True, index=True, nullable=False)
    website: Mapped[Optional[str]] = mapped_column(Text)
    logo: Mapped[Optional[str]] = mapped_column(Text)
    # Único destino de redirecionamento para este cliente
    redirect_uri: Mapped[str] = mapped_column(Text, nullable=False)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=func.now())
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=func.now(), onupdate=func.now()
    )
    # --- Soft delete ---
    deleted_at: Mapped[Optional[datetime]] = mapped_column(DateTime, index=True, nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None
