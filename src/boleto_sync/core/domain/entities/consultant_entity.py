from __future__ import annotations

import uuid
from dataclasses import dataclass

from boleto_sync.core.domain.entities._base import EntityMixin


@dataclass(slots=True)
class ConsultantEntity(EntityMixin):
    id: uuid.UUID
    client_id: uuid.UUID
    name: str
    sga_consultant_code: str
    contact: str | None = None
    active: bool = True
