# auth_service/app/schemas/client.py
from pydantic import BaseModel
from typing import Optional

class ClientBase(BaseModel):
    name: str
    website: Optional[str] = None
    logo: Optional[str] = None
    redirect_uri: str

class ClientCreate(ClientBase):
    id: str

class ClientUpdate(BaseModel):
    name: Optional[str] = None
    website: Optional[str] = None
    logo: Optional[str] = None
    redirect_uri: Optional[str] = None
