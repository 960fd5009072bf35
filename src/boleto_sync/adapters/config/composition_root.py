from dependency_injector import containers, providers

container = None


def setup_di_container_from_settings(settings):
    """
    Inicializa o DI container do contexto de boletos após o Django
    já estar com settings carregados. Idempotente.
    """
    global container  # noqa: PLW0603
    if container is not None:
        return container

    # ------- IMPORTS QUE USAM DJANGO MODELS -------
    import structlog

    if settings is None:
        from django.conf import settings

    from boleto_sync.adapters.api_clients.sga_api_client import SgaAPIClient
    from boleto_sync.adapters.locks.client_sync_lock import ClientSyncLock
    from boleto_sync.adapters.repositories.boleto_repo_impl import BoletoRepoImpl
    from boleto_sync.adapters.repositories.client_repo_impl import ClientRepoImpl
    from boleto_sync.adapters.repositories.consultant_repo_impl import ConsultantRepoImpl
    from boleto_sync.adapters.repositories.consultor_link_repo_impl import ConsultorLinkRepoImpl
    from boleto_sync.adapters.repositories.filter_config_repo_impl import FilterConfigRepoImpl

    # Commands / Queries
    from boleto_sync.core.application.commands.boleto_commands import RefreshBoletoDetailCommand
    from boleto_sync.core.application.commands.link_commands import (
        IssueConsultorLinksCommand,
        RebuildLinkUrlsCommand,
    )
    from boleto_sync.core.application.commands.sync_commands import SyncBoletosCommand
    from boleto_sync.core.application.cqrs import CommandBus, QueryBus

    # Handlers
    from boleto_sync.core.application.handlers.boleto_handlers import (
        GetBoletoByNossoNumeroHandler,
        GetBoletoHandler,
        GetConsultantSummaryHandler,
        ListBoletosHandler,
        RefreshBoletoDetailHandler,
    )
    from boleto_sync.core.application.handlers.link_handlers import (
        IssueConsultorLinksHandler,
        ListConsultorLinksHandler,
        RebuildLinkUrlsHandler,
        ResolveShortCodeHandler,
        ResolveSlugHandler,
    )
    from boleto_sync.core.application.handlers.sync_handlers import SyncBoletosHandler
    from boleto_sync.core.application.queries.boleto_queries import (
        GetBoletoByNossoNumeroQuery,
        GetBoletoQuery,
        GetConsultantSummaryQuery,
        ListBoletosQuery,
    )
    from boleto_sync.core.application.queries.link_queries import (
        ListConsultorLinksQuery,
        ResolveShortCodeQuery,
        ResolveSlugQuery,
    )
    from boleto_sync.core.application.services.eligibility_filter import EligibilityFilter
    from boleto_sync.core.domain.mappers.sga_payload_mapper import SgaPayloadMapper

    log = structlog.get_logger(__name__)

    class BoletoSyncContainer(containers.DeclarativeContainer):
        config = providers.Configuration()

        # ─── Infra ────────────────────────────────────────────
        sga_client = providers.Factory(
            SgaAPIClient,
            timeout=config.sga_timeout,
            detail_timeout=config.sga_detail_timeout,
            page_size=config.sga_page_size,
        )
        sync_lock = providers.Singleton(ClientSyncLock, ttl=config.sync_lock_ttl)

        # ─── Repositórios ─────────────────────────────────────
        client_repo = providers.Singleton(ClientRepoImpl)
        consultant_repo = providers.Singleton(ConsultantRepoImpl)
        filter_config_repo = providers.Singleton(FilterConfigRepoImpl)
        boleto_repo = providers.Singleton(BoletoRepoImpl)
        consultor_link_repo = providers.Singleton(ConsultorLinkRepoImpl)

        # ─── Serviços de domínio ──────────────────────────────
        eligibility_filter = providers.Singleton(EligibilityFilter)
        mapper = providers.Singleton(SgaPayloadMapper)

        # ─── Handlers ─────────────────────────────────────────
        issue_links_handler = providers.Factory(
            IssueConsultorLinksHandler,
            boleto_repo=boleto_repo,
            link_repo=consultor_link_repo,
            app_base_url=config.app_base_url,
            max_attempts=config.short_code_max_attempts,
        )
        sync_handler = providers.Factory(
            SyncBoletosHandler,
            client_repo=client_repo,
            consultant_repo=consultant_repo,
            filter_config_repo=filter_config_repo,
            boleto_repo=boleto_repo,
            link_issuer=issue_links_handler,
            sga_client_factory=sga_client.provider,
            sync_lock=sync_lock,
            eligibility=eligibility_filter,
            mapper=mapper,
        )
        refresh_detail_handler = providers.Factory(
            RefreshBoletoDetailHandler,
            client_repo=client_repo,
            boleto_repo=boleto_repo,
            sga_client_factory=sga_client.provider,
        )
        rebuild_urls_handler = providers.Factory(
            RebuildLinkUrlsHandler, link_repo=consultor_link_repo, app_base_url=config.app_base_url
        )
        list_boletos_handler = providers.Factory(ListBoletosHandler, boleto_repo=boleto_repo)
        get_boleto_handler = providers.Factory(GetBoletoHandler, boleto_repo=boleto_repo)
        get_boleto_by_nn_handler = providers.Factory(GetBoletoByNossoNumeroHandler, boleto_repo=boleto_repo)
        consultant_summary_handler = providers.Factory(GetConsultantSummaryHandler, boleto_repo=boleto_repo)
        list_links_handler = providers.Factory(
            ListConsultorLinksHandler, link_repo=consultor_link_repo, app_base_url=config.app_base_url
        )
        resolve_slug_handler = providers.Factory(
            ResolveSlugHandler, link_repo=consultor_link_repo, app_base_url=config.app_base_url
        )
        resolve_short_code_handler = providers.Factory(
            ResolveShortCodeHandler, link_repo=consultor_link_repo, app_base_url=config.app_base_url
        )

        # ─── Buses ────────────────────────────────────────────
        command_bus = providers.Singleton(CommandBus)
        query_bus = providers.Singleton(QueryBus)

    c = BoletoSyncContainer()
    c.config.from_dict(
        {
            "sga_timeout": float(settings.SGA_TIMEOUT),
            "sga_detail_timeout": float(settings.SGA_DETAIL_TIMEOUT),
            "sga_page_size": int(settings.SGA_PAGE_SIZE),
            "sync_lock_ttl": int(settings.SYNC_LOCK_TTL_SECONDS),
            "app_base_url": settings.APP_BASE_URL or "",
            "short_code_max_attempts": int(settings.SHORT_CODE_MAX_ATTEMPTS),
        }
    )

    # ─── Registro de comandos ────────────────────────────────
    cmd_bus = c.command_bus()
    cmd_bus.register(SyncBoletosCommand, c.sync_handler())
    cmd_bus.register(IssueConsultorLinksCommand, c.issue_links_handler())
    cmd_bus.register(RebuildLinkUrlsCommand, c.rebuild_urls_handler())
    cmd_bus.register(RefreshBoletoDetailCommand, c.refresh_detail_handler())

    # ─── Registro de queries ─────────────────────────────────
    q_bus = c.query_bus()
    q_bus.register(ListBoletosQuery, c.list_boletos_handler())
    q_bus.register(GetBoletoQuery, c.get_boleto_handler())
    q_bus.register(GetBoletoByNossoNumeroQuery, c.get_boleto_by_nn_handler())
    q_bus.register(GetConsultantSummaryQuery, c.consultant_summary_handler())
    q_bus.register(ListConsultorLinksQuery, c.list_links_handler())
    q_bus.register(ResolveSlugQuery, c.resolve_slug_handler())
    q_bus.register(ResolveShortCodeQuery, c.resolve_short_code_handler())

    container = c
    log.debug("boleto_sync.container_ready")
    return container


def reset_container() -> None:
    """Descarta o container global (usado pelos testes com override_settings)."""
    global container  # noqa: PLW0603
    container = None
