from rest_framework.routers import DefaultRouter

from .views.core_views import ClientViewSet, ConsultantViewSet, FilterConfigViewSet

# lista de (rota, ViewSet)
RESOURCES = [
    ("clients",        ClientViewSet),
    ("consultants",    ConsultantViewSet),
    ("filter-configs", FilterConfigViewSet),
]

def build_router() -> DefaultRouter:
    router = DefaultRouter(trailing_slash=False)
    # Registra todos os CRUDs
    for prefix, viewset in RESOURCES:
        router.register(prefix, viewset, basename=prefix.replace('-', '_'))
    return router
