#!/usr/bin/env python
import os
import sys
from pathlib import Path

from config.structlog_config import configure_logging

sys.path.insert(0, str(Path(__file__).resolve().parent / "src"))

configure_logging()
os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'config.settings')


def main():
    """Ponto de entrada dos comandos de gerenciamento da Central do Consultor."""
    try:
        from django.core.management import execute_from_command_line
    except ImportError as exc:
        raise ImportError(
            "Não foi possível importar Django. Verifique se está instalado e no seu PYTHONPATH."
        ) from exc

    execute_from_command_line(sys.argv)


if __name__ == '__main__':
    main()
