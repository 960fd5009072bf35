"""
Domínio → ORM da Central do Consultor.

⚑ Cliente (tenant) com credencial/endpoint próprios do SGA
⚑ Boleto com chave natural (client, nosso_numero) garantida por constraint
⚑ Link público por (client, consultant, period) com slug + short code únicos
"""

from __future__ import annotations

import uuid

from django.db import models
from django.db.models import Index, UniqueConstraint


# ╭──────────────────────────────────────────────╮
# │ 1. Clientes / Consultores                    │
# ╰──────────────────────────────────────────────╯
class Client(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    bearer_token = models.TextField()
    api_base_url = models.URLField(max_length=500)
    active = models.BooleanField(default=True, db_index=True)
    logo_url = models.URLField(max_length=500, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "clients"
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Consultant(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name="consultants")
    name = models.CharField(max_length=255)
    sga_consultant_code = models.CharField(max_length=50)
    contact = models.CharField(max_length=100, blank=True, null=True)
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "consultants"
        ordering = ["name"]
        constraints = [
            UniqueConstraint(fields=["client", "sga_consultant_code"], name="uq_consultant_client_code"),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.sga_consultant_code})"


class FilterConfig(models.Model):
    """Situações de veículo aceitas na sincronização (ausente ⇒ apenas ATIVO)."""
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.OneToOneField(Client, on_delete=models.CASCADE, related_name="filter_config")
    accepted_vehicle_statuses = models.JSONField(default=list)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "filter_configs"

    def __str__(self) -> str:
        return f"FilterConfig<{self.client_id}>"


# ╭──────────────────────────────────────────────╮
# │ 2. Boletos                                   │
# ╰──────────────────────────────────────────────╯
class Boleto(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name="boletos")
    consultant = models.ForeignKey(Consultant, on_delete=models.PROTECT, related_name="boletos")
    nosso_numero = models.CharField(max_length=50)
    digitable_line = models.CharField(max_length=120, blank=True, default="")
    amount = models.DecimalField(max_digits=14, decimal_places=2, default=0)
    debtor_name = models.CharField(max_length=255, blank=True, default="")
    debtor_document = models.CharField(max_length=20, blank=True, default="")
    debtor_phone = models.CharField(max_length=30, blank=True, default="")
    due_date = models.DateField(blank=True, null=True)
    billing_status = models.CharField(max_length=50, blank=True, default="", db_index=True)
    vehicle_status = models.CharField(max_length=50, blank=True, default="")
    vehicle_model = models.CharField(max_length=255, blank=True, default="")
    vehicle_plate = models.CharField(max_length=20, blank=True, default="")
    reference_month = models.CharField(max_length=7, blank=True, default="", db_index=True)
    pix_copy_paste = models.TextField(blank=True, null=True)
    pdf_url = models.URLField(max_length=1000, blank=True, null=True)
    raw_payload = models.JSONField(default=dict)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "boletos"
        constraints = [
            UniqueConstraint(fields=["client", "nosso_numero"], name="uq_boleto_client_nosso_numero"),
        ]
        indexes = [
            Index(fields=["client", "consultant"]),
            Index(fields=["client", "reference_month"]),
            Index(fields=["-due_date", "-created_at"], name="boleto_listing_idx"),
        ]

    def __str__(self) -> str:
        return self.nosso_numero


# ╭──────────────────────────────────────────────╮
# │ 3. Links públicos por consultor               │
# ╰──────────────────────────────────────────────╯
class ConsultorLink(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    client = models.ForeignKey(Client, on_delete=models.CASCADE, related_name="consultor_links")
    consultant = models.ForeignKey(Consultant, on_delete=models.CASCADE, related_name="links")
    period = models.CharField(max_length=7)
    slug = models.CharField(max_length=64, unique=True)
    short_code = models.CharField(max_length=6, unique=True, blank=True, null=True)
    full_url = models.CharField(max_length=500, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "consultor_links"
        constraints = [
            UniqueConstraint(fields=["client", "consultant", "period"], name="uq_link_client_consultant_period"),
        ]

    def __str__(self) -> str:
        return f"{self.period} · {self.short_code or self.slug[:8]}"


# ╭──────────────────────────────────────────────╮
# │ 4. Chaves de API (gerenciadas no admin)       │
# ╰──────────────────────────────────────────────╯
class ApiKey(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    key = models.CharField(max_length=128, unique=True)
    description = models.CharField(max_length=255, blank=True, default="")
    active = models.BooleanField(default=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = "api_keys"

    @property
    def is_authenticated(self) -> bool:
        return True

    def __str__(self) -> str:
        return self.description or f"ApiKey<{self.key[:6]}…>"
