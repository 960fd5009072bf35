from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from boleto_sync.core.domain.entities._base import EntityMixin

DEFAULT_ACCEPTED_VEHICLE_STATUSES = frozenset({"ATIVO"})


@dataclass(slots=True)
class FilterConfigEntity(EntityMixin):
    client_id: uuid.UUID
    accepted_vehicle_statuses: list[str] = field(default_factory=list)

    def accepted_set(self) -> frozenset[str]:
        """Situações aceitas; lista vazia cai no padrão {'ATIVO'}."""
        cleaned = {s.strip() for s in self.accepted_vehicle_statuses if isinstance(s, str) and s.strip()}
        return frozenset(cleaned) or DEFAULT_ACCEPTED_VEHICLE_STATUSES
