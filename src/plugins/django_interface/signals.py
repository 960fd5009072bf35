from django.db.models.signals import pre_save
from django.dispatch import receiver

from .models import Consultant, FilterConfig


@receiver(pre_save, sender=Consultant)
def normalize_consultant_before_save(sender, instance: Consultant, **kwargs):
    # o código é comparado byte a byte com `codigo_voluntario` do SGA
    instance.sga_consultant_code = (instance.sga_consultant_code or "").strip()
    if not instance.sga_consultant_code:
        raise ValueError("Código do consultor no SGA é obrigatório.")
    instance.name = (instance.name or "").strip()


@receiver(pre_save, sender=FilterConfig)
def normalize_filter_statuses_before_save(sender, instance: FilterConfig, **kwargs):
    statuses = instance.accepted_vehicle_statuses or []
    instance.accepted_vehicle_statuses = list(dict.fromkeys(s.strip() for s in statuses if isinstance(s, str) and s.strip()))
