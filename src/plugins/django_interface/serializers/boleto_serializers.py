# =========================================================
# Serializers da sincronização de boletos e dos links
# de consultor. Saída compatível com as *entities*.
# =========================================================
from rest_framework import serializers

from boleto_sync.core.domain.exceptions import InvalidDateError
from boleto_sync.core.utils.date_utils import parse_br_date

PERIOD_PATTERN = r"^(0[1-9]|1[0-2])/\d{4}$"


class BrDateField(serializers.CharField):
    """Data DD/MM/YYYY validada (mantida como string)."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        try:
            parse_br_date(value)
        except InvalidDateError as exc:
            raise serializers.ValidationError(str(exc)) from exc
        return value


# ───────────────────────────────────────────────
# Entradas
# ───────────────────────────────────────────────
class SyncBoletosInputSerializer(serializers.Serializer):
    client_id      = serializers.UUIDField()
    start_date     = BrDateField(required=False)
    end_date       = BrDateField(required=False)
    situation_code = serializers.CharField(required=False, max_length=10)
    run_async      = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        start, end = attrs.get("start_date"), attrs.get("end_date")
        if start and end and parse_br_date(start) > parse_br_date(end):
            raise serializers.ValidationError("start_date deve ser anterior ou igual a end_date.")
        return attrs


class IssueLinksInputSerializer(serializers.Serializer):
    client_id = serializers.UUIDField()
    period    = serializers.RegexField(PERIOD_PATTERN, error_messages={"invalid": "Use o formato MM/YYYY."})


class ListBoletosParamsSerializer(serializers.Serializer):
    client_id      = serializers.UUIDField()
    consultant_id  = serializers.UUIDField(required=False)
    billing_status = serializers.CharField(required=False)
    start_date     = BrDateField(required=False)
    end_date       = BrDateField(required=False)
    page           = serializers.IntegerField(required=False, default=1, min_value=1)
    limit          = serializers.IntegerField(required=False, default=50, min_value=1, max_value=500)


class ClientScopedParamsSerializer(serializers.Serializer):
    client_id     = serializers.UUIDField()
    consultant_id = serializers.UUIDField(required=False)


class ListLinksParamsSerializer(serializers.Serializer):
    client_id = serializers.UUIDField()
    period    = serializers.RegexField(PERIOD_PATTERN, required=False)


# ───────────────────────────────────────────────
# Saídas
# ───────────────────────────────────────────────
class BoletoSerializer(serializers.Serializer):
    id              = serializers.UUIDField()
    client_id       = serializers.UUIDField()
    consultant_id   = serializers.UUIDField()
    consultant_name = serializers.CharField(allow_null=True)
    client_name     = serializers.CharField(allow_null=True)
    nosso_numero    = serializers.CharField()
    digitable_line  = serializers.CharField(allow_blank=True)
    amount          = serializers.DecimalField(max_digits=14, decimal_places=2)
    debtor_name     = serializers.CharField(allow_blank=True)
    debtor_document = serializers.CharField(allow_blank=True)
    debtor_phone    = serializers.CharField(allow_blank=True)
    due_date        = serializers.DateField(allow_null=True)
    billing_status  = serializers.CharField(allow_blank=True)
    vehicle_status  = serializers.CharField(allow_blank=True)
    vehicle_model   = serializers.CharField(allow_blank=True)
    vehicle_plate   = serializers.CharField(allow_blank=True)
    reference_month = serializers.CharField(allow_blank=True)
    pix_copy_paste  = serializers.CharField(allow_null=True)
    pdf_url         = serializers.CharField(allow_null=True)
    created_at      = serializers.DateTimeField()
    updated_at      = serializers.DateTimeField()


class BoletoDetailSerializer(BoletoSerializer):
    raw_payload = serializers.JSONField()
