from rest_framework.permissions import BasePermission

from plugins.django_interface.models import ApiKey


class HasValidApiKey(BasePermission):
    """Acesso apenas com X-API-Key ativa (resolvida pela ApiKeyAuthentication)."""

    message = "API key ausente ou inválida."

    def has_permission(self, request, view):
        return isinstance(request.auth, ApiKey) and request.auth.active
