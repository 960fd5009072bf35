from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from boleto_sync.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ClientEntity(EntityMixin):
    id: uuid.UUID
    name: str
    bearer_token: str
    api_base_url: str
    active: bool = True
    logo_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
