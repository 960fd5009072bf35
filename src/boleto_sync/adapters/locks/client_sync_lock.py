from __future__ import annotations

import time
from contextlib import contextmanager

import structlog
from django.core.cache import cache

from boleto_sync.core.domain.exceptions import SyncAlreadyRunningError

logger = structlog.get_logger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60


class ClientSyncLock:
    """
    Exclusão mútua por cliente sobre o backend de cache (Redis em produção).
    `cache.add` só grava se a chave não existir, o que torna a aquisição atômica.
    """

    def __init__(self, namespace: str = "boleto_sync", ttl: int = DEFAULT_TTL_SECONDS) -> None:
        self.namespace = namespace
        self.ttl = ttl

    def key_for(self, client_id) -> str:
        return f"locks:{self.namespace}:client:{client_id}"

    def is_locked(self, client_id) -> bool:
        return cache.get(self.key_for(client_id)) is not None

    @contextmanager
    def hold(self, client_id):
        key = self.key_for(client_id)
        acquired = cache.add(key, str(time.time()), self.ttl)
        if not acquired:
            logger.warning("sync.lock.busy", client_id=str(client_id))
            raise SyncAlreadyRunningError(client_id)
        logger.debug("sync.lock.acquired", client_id=str(client_id), ttl=self.ttl)
        try:
            yield
        finally:
            cache.delete(key)
