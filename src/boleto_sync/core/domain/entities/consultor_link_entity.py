from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import datetime

from boleto_sync.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ConsultorLinkEntity(EntityMixin):
    id: uuid.UUID
    client_id: uuid.UUID
    consultant_id: uuid.UUID
    period: str
    slug: str
    short_code: str | None = None
    full_url: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
    consultant_name: str | None = None
    consultant_contact: str | None = None
    logo_url: str | None = None
