from prometheus_client import Counter, Histogram

# Registradas no REGISTRY padrão: exportadas pelo django-prometheus em /metrics/

SYNC_DURATION = Histogram(
    "boleto_sync_duration_seconds",
    "Tempo de execucao do SyncBoletosHandler",
    ["client"],
    buckets=(1, 5, 15, 30, 60, 120, 300, 600, 1200),
)

SYNC_RUNS = Counter(
    "boleto_sync_runs_total",
    "Execucoes de sincronizacao por resultado",
    ["client", "outcome"],
)

BOLETOS_UPSERTED = Counter(
    "boleto_sync_upserts_total",
    "Boletos gravados por resultado (inserted/updated)",
    ["client", "outcome"],
)

RECORDS_REJECTED = Counter(
    "boleto_sync_rejections_total",
    "Boletos/veiculos rejeitados pelo filtro de elegibilidade",
    ["client", "reason"],
)

RECORD_ERRORS = Counter(
    "boleto_sync_record_errors_total",
    "Falhas de processamento por boleto",
    ["client"],
)

LINKS_ISSUED = Counter(
    "consultor_links_issued_total",
    "Links de consultor criados (novos)",
    ["client"],
)
