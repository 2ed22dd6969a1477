# auth_service/app/services/pending_authorization.py
import asyncio
from datetime import datetime, timezone
from typing import Dict

from loguru import logger


class ConsumedCodeRegistry:
    """
    Registo em memória dos códigos já consumidos em /confirm_auth.

    O pedido pendente viaja assinado no cookie; este registo só guarda o
    código até ao fim da sua validade, para que um replay do mesmo cookie
    seja recusado. Depois de expirado o código é rejeitado pela assinatura,
    por isso a entrada pode ser descartada.
    """

    def __init__(self):
        self._consumed: Dict[str, datetime] = {}
        self._lock = asyncio.Lock()

    async def consume(self, code: str, expires_at: datetime) -> bool:
        """Marca o código como usado. Devolve False se já tinha sido usado."""
        async with self._lock:
            self._prune(datetime.now(timezone.utc))
            if code in self._consumed:
                return False
            self._consumed[code] = expires_at
            return True

    async def is_consumed(self, code: str) -> bool:
        async with self._lock:
            return code in self._consumed

    def _prune(self, now: datetime) -> None:
        expired = [code for code, exp in self._consumed.items() if exp <= now]
        for code in expired:
            del self._consumed[code]
        if expired:
            logger.debug(f"{len(expired)} códigos consumidos expirados removidos do registo")

    def __len__(self) -> int:
        return len(self._consumed)
