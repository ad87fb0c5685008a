# src/subocr/log_utils.py
from __future__ import annotations

"""
Configuración de logging para la CLI. Los módulos sólo hacen
`logging.getLogger(__name__)`; nunca configuran handlers.
"""

import logging
import sys

LOG_FORMAT = "%(levelname)-7s %(name)s: %(message)s"


def setup_logging(level: int | str = logging.INFO, *, stream=None) -> None:
    """Un único handler de consola en el root logger (reemplaza los previos)."""
    root = logging.getLogger()
    # primero el nivel: un nombre inválido falla antes de tocar handlers
    root.setLevel(level)
    for h in root.handlers[:]:
        root.removeHandler(h)
        h.close()

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)

    # Silencia librerías ruidosas
    logging.getLogger("PIL").setLevel(logging.WARNING)
