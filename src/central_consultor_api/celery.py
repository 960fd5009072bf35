import os

from celery import Celery

# Define o módulo de configurações do Django para o Celery.
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')

app = Celery('central_consultor_api')

# Todas as opções do Celery vêm das settings com prefixo CELERY_.
app.config_from_object('django.conf:settings', namespace='CELERY')

# Procura tasks.py em cada app de INSTALLED_APPS.
app.autodiscover_tasks()
