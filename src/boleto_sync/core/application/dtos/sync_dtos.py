from __future__ import annotations

import uuid

from pydantic import BaseModel, Field

REJECTION_REASONS = ("no_vehicles", "status_rejected", "consultant_unmatched", "ambiguous_consultant")


class RecordErrorDTO(BaseModel):
    nosso_numero: str | None = None
    error: str


class RejectionCountsDTO(BaseModel):
    no_vehicles: int = 0
    status_rejected: int = 0
    consultant_unmatched: int = 0
    ambiguous_consultant: int = 0

    @property
    def total(self) -> int:
        return self.no_vehicles + self.status_rejected + self.consultant_unmatched + self.ambiguous_consultant

    def add(self, reason: str, amount: int = 1) -> None:
        if reason not in REJECTION_REASONS:
            raise ValueError(f"Motivo de rejeição desconhecido: {reason}")
        setattr(self, reason, getattr(self, reason) + amount)


class IssuedLinkDTO(BaseModel):
    consultant_id: uuid.UUID
    consultant_name: str
    period: str
    slug: str
    short_code: str | None
    full_url: str
    short_url: str | None


class ResolvedLinkDTO(BaseModel):
    client_id: uuid.UUID
    consultant_id: uuid.UUID
    period: str
    consultant_name: str
    logo_url: str | None = None
    slug: str
    full_url: str


class SyncStatsDTO(BaseModel):
    """Relatório de uma execução de sincronização."""
    client_id: uuid.UUID
    period: str
    total_processed: int = 0
    total_inserted: int = 0
    total_updated: int = 0
    rejected: RejectionCountsDTO = Field(default_factory=RejectionCountsDTO)
    errors: list[RecordErrorDTO] = Field(default_factory=list)
    links_issued: int = 0
    links: list[IssuedLinkDTO] = Field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def total_rejected(self) -> int:
        return self.rejected.total

    def as_response(self) -> dict:
        data = self.model_dump(mode="json")
        data["total_rejected"] = self.total_rejected
        return data
