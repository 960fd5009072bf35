import os

from django.core.wsgi import get_wsgi_application

from config.structlog_config import configure_logging

# 1) Ajuste padrão de settings e logging
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")
configure_logging()

# 2) Cria a aplicação WSGI (o DI é montado em CentralConsultorConfig.ready)
application = get_wsgi_application()
