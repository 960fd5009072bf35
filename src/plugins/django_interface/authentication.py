import structlog
from rest_framework import authentication, exceptions

from plugins.django_interface.models import ApiKey

logger = structlog.get_logger(__name__)

API_KEY_HEADER = "HTTP_X_API_KEY"


class ApiKeyAuthentication(authentication.BaseAuthentication):
    """
    Autenticação por segredo compartilhado no header `X-API-Key`,
    validado contra a tabela `api_keys` (apenas chaves ativas).
    """

    keyword = "X-API-Key"

    def authenticate(self, request):
        raw = request.META.get(API_KEY_HEADER, "").strip()
        if not raw:
            return None
        api_key = ApiKey.objects.filter(key=raw, active=True).first()
        if api_key is None:
            logger.warning("auth.api_key_rejected", path=request.path)
            raise exceptions.AuthenticationFailed("API key inválida ou inativa.")
        return (api_key, api_key)

    def authenticate_header(self, request):
        return self.keyword
