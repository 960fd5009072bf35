# =========================================================
# Serializers de cadastro (CRUD): Clientes, Consultores e
# configuração de filtro. Operam direto sobre os modelos.
# =========================================================
from rest_framework import serializers

from plugins.django_interface.models import Client, Consultant, FilterConfig


# ───────────────────────────────────────────────
# Clientes
# ───────────────────────────────────────────────
class ClientSerializer(serializers.ModelSerializer):
    bearer_token = serializers.CharField(write_only=True, trim_whitespace=True)

    class Meta:
        model = Client
        fields = [
            "id", "name", "bearer_token", "api_base_url", "active",
            "logo_url", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]


# ───────────────────────────────────────────────
# Consultores
# ───────────────────────────────────────────────
class ConsultantSerializer(serializers.ModelSerializer):
    class Meta:
        model = Consultant
        fields = [
            "id", "client", "name", "sga_consultant_code", "contact",
            "active", "created_at", "updated_at",
        ]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_sga_consultant_code(self, value: str) -> str:
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Código do consultor no SGA é obrigatório.")
        return value


# ───────────────────────────────────────────────
# Filtro de situações de veículo
# ───────────────────────────────────────────────
class FilterConfigSerializer(serializers.ModelSerializer):
    accepted_vehicle_statuses = serializers.ListField(
        child=serializers.CharField(max_length=50, trim_whitespace=True),
        allow_empty=True,
    )

    class Meta:
        model = FilterConfig
        fields = ["id", "client", "accepted_vehicle_statuses", "created_at", "updated_at"]
        read_only_fields = ["id", "created_at", "updated_at"]

    def validate_accepted_vehicle_statuses(self, value: list[str]) -> list[str]:
        # preserva a ordem, remove duplicados e vazios
        return list(dict.fromkeys(s for s in value if s))
