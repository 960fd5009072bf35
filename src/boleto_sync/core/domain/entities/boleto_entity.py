from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from boleto_sync.core.domain.entities._base import EntityMixin

# Campos sobrescritos a cada nova aparição do boleto no SGA
MUTABLE_FIELDS = (
    "consultant_id",
    "digitable_line",
    "amount",
    "debtor_name",
    "debtor_document",
    "debtor_phone",
    "due_date",
    "billing_status",
    "vehicle_status",
    "vehicle_model",
    "vehicle_plate",
    "reference_month",
    "raw_payload",
)


class UpsertOutcome(str, enum.Enum):
    INSERTED = "inserted"
    UPDATED = "updated"


@dataclass(slots=True)
class BoletoEntity(EntityMixin):
    client_id: uuid.UUID
    consultant_id: uuid.UUID
    nosso_numero: str
    digitable_line: str = ""
    amount: Decimal = Decimal("0")
    debtor_name: str = ""
    debtor_document: str = ""
    debtor_phone: str = ""
    due_date: date | None = None
    billing_status: str = ""
    vehicle_status: str = ""
    vehicle_model: str = ""
    vehicle_plate: str = ""
    reference_month: str = ""
    raw_payload: dict[str, Any] = field(default_factory=dict)
    pix_copy_paste: str | None = None
    pdf_url: str | None = None
    id: uuid.UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    consultant_name: str | None = None
    client_name: str | None = None

    def mutable_values(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in MUTABLE_FIELDS}
