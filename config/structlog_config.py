import logging
import sys

import structlog
from decouple import config
from structlog.processors import CallsiteParameter, CallsiteParameterAdder

SERVICE_NAME = "central-consultor"

# bibliotecas que falam demais em INFO
NOISY_LOGGERS = ("urllib3.connectionpool", "celery.worker.strategy", "django.db.backends")


def _add_service(_, __, event_dict):
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def _shared_processors() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service,
    ]


def configure_logging(level: str | None = None, json_logs: bool | None = None) -> None:
    """
    Liga structlog ao logging padrão com um único handler em stdout.

    LOG_LEVEL e JSON_LOGS vêm do ambiente quando não informados. Em JSON
    cada linha é um evento; sem JSON usa o ConsoleRenderer.
    Chamar antes de qualquer módulo criar loggers.
    """
    level = (level or config("LOG_LEVEL", default="INFO")).upper()
    if json_logs is None:
        json_logs = config("JSON_LOGS", default=False, cast=bool)

    shared = _shared_processors()
    renderer = (
        structlog.processors.JSONRenderer(ensure_ascii=False)
        if json_logs
        else structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())
    )

    structlog.configure(
        processors=[
            *shared,
            CallsiteParameterAdder(
                parameters=[CallsiteParameter.MODULE, CallsiteParameter.FUNC_NAME, CallsiteParameter.LINENO]
            ),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level)),
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(processor=renderer, foreign_pre_chain=shared))

    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(logging.WARNING, root.level))

    logging.captureWarnings(True)
