from django.conf import settings
from django.urls import include, path
from drf_yasg import openapi
from drf_yasg.views import get_schema_view
from rest_framework import permissions

from .routers import build_router
from .views.boleto_views import (
    BoletoDetailView,
    BoletoListView,
    BoletoPdfView,
    BoletoSgaDetailView,
    ConsultantSummaryView,
    SyncBoletosView,
)
from .views.core_views import HealthCheckView
from .views.link_views import (
    ConsultorLinkListView,
    IssueConsultorLinksView,
    ResolveShortCodeView,
    ResolveSlugView,
)

swagger_permissions = [permissions.IsAdminUser] if not settings.DEBUG else [permissions.AllowAny]

schema_view = get_schema_view(
    openapi.Info(
        title="Central do Consultor",
        default_version="v1",
        description="Sincronização de boletos do SGA e links de consultor",
    ),
    public=settings.DEBUG,
    permission_classes=swagger_permissions,
)

router = build_router()

urlpatterns = [
    path("healthz/", HealthCheckView.as_view(), name="healthz"),

    # boletos
    path("boletos/sync", SyncBoletosView.as_view(), name="boletos-sync"),
    path("boletos", BoletoListView.as_view(), name="boletos-list"),
    path("boletos/detail/<str:nosso_numero>", BoletoSgaDetailView.as_view(), name="boletos-sga-detail"),
    path("boletos/pdf/<str:nosso_numero>", BoletoPdfView.as_view(), name="boletos-pdf"),
    path("boletos/<uuid:boleto_id>", BoletoDetailView.as_view(), name="boletos-detail"),
    path("consultants/<uuid:consultant_id>/summary", ConsultantSummaryView.as_view(), name="consultant-summary"),

    # links de consultor
    path("consultor-links", ConsultorLinkListView.as_view(), name="consultor-links-list"),
    path("consultor-links/issue", IssueConsultorLinksView.as_view(), name="consultor-links-issue"),
    path("consultor-link/s/<str:code>", ResolveShortCodeView.as_view(), name="consultor-link-short"),
    path("consultor-link/<str:slug>", ResolveSlugView.as_view(), name="consultor-link-slug"),

    path("swagger/",     schema_view.with_ui("swagger", cache_timeout=0), name="swagger-ui"),
    path("swagger.json", schema_view.without_ui(cache_timeout=0),         name="swagger-json"),
    path("redoc/",       schema_view.with_ui("redoc",   cache_timeout=0), name="redoc-ui"),

    # todas as rotas CRUD
    path("", include(router.urls)),
]
