"""
Admin site registry
-------------------
Registra os modelos da Central do Consultor. Chaves de API são
geridas exclusivamente por aqui.
"""

import structlog
from django.contrib import admin as django_admin

from . import models

logger = structlog.get_logger(__name__)

# ╭──────────────────────────────────────────────╮
# │ Configuração de cada ModelAdmin             │
# ╰──────────────────────────────────────────────╯
MODEL_ADMIN_REGISTRY: dict[type[models.models.Model], dict] = {
    # 1. Clientes
    models.Client: dict(
        list_display=("name", "api_base_url", "active", "created_at"),
        list_filter=("active",),
        search_fields=("name",),
    ),
    models.Consultant: dict(
        list_display=("name", "sga_consultant_code", "client", "contact", "active"),
        list_filter=("client", "active"),
        search_fields=("name", "sga_consultant_code"),
    ),
    models.FilterConfig: dict(
        list_display=("client", "accepted_vehicle_statuses", "updated_at"),
    ),
    # 2. Boletos
    models.Boleto: dict(
        list_display=("nosso_numero", "client", "consultant", "due_date", "billing_status", "amount"),
        list_filter=("client", "billing_status", "reference_month"),
        search_fields=("nosso_numero", "debtor_name", "debtor_document", "vehicle_plate"),
        readonly_fields=("raw_payload", "created_at", "updated_at"),
    ),
    # 3. Links
    models.ConsultorLink: dict(
        list_display=("consultant", "client", "period", "short_code", "updated_at"),
        list_filter=("client", "period"),
        search_fields=("short_code", "slug", "consultant__name"),
        readonly_fields=("slug", "short_code", "created_at", "updated_at"),
    ),
    # 4. Segurança
    models.ApiKey: dict(
        list_display=("description", "active", "created_at"),
        list_filter=("active",),
        search_fields=("description",),
    ),
}

# ╭──────────────────────────────────────────────╮
# │ Registro dinâmico                           │
# ╰──────────────────────────────────────────────╯
for model, opts in MODEL_ADMIN_REGISTRY.items():
    admin_class = type(f"{model.__name__}Admin", (django_admin.ModelAdmin,), opts)
    django_admin.site.register(model, admin_class)
    logger.debug("admin.model_registered", model=model.__name__)
