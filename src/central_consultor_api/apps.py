from django.apps import AppConfig


class CentralConsultorConfig(AppConfig):
    name = "central_consultor_api"
    verbose_name = "Central do Consultor API"

    def ready(self):
        from django.conf import settings

        # ─── Celery app (liga as shared_tasks às settings do Django) ───
        from central_consultor_api import celery  # noqa: F401

        # ─── DI container ───────────────────────────────────────────
        from boleto_sync.adapters.config.composition_root import setup_di_container_from_settings

        setup_di_container_from_settings(settings)
