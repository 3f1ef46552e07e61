# guarafood/utils/logger.py

import logging
from logging.handlers import RotatingFileHandler

from guarafood.config.settings import LOG_DIR, LOG_FILE_BACKUP_COUNT, LOG_FILE_MAX_BYTES, LOG_LEVEL
from guarafood.utils.prometheus_metrics import record_log

FORMATO = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("guarafood")
logger.setLevel(LOG_LEVEL)


class PrometheusLogHandler(logging.Handler):
    """Conta os registros por nível em `guarafood_log_messages_total`."""

    def emit(self, record):
        try:
            record_log(record.levelname)
        except Exception:
            self.handleError(record)


# Evita duplicar handlers se importar várias vezes
if not logger.handlers:
    LOG_DIR.mkdir(parents=True, exist_ok=True)
    formatter = logging.Formatter(FORMATO)

    file_handler = RotatingFileHandler(
        filename=LOG_DIR / "app.log",
        maxBytes=LOG_FILE_MAX_BYTES,
        backupCount=LOG_FILE_BACKUP_COUNT,
        encoding="utf-8",
    )
    console_handler = logging.StreamHandler()
    for handler in (file_handler, console_handler):
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.addHandler(PrometheusLogHandler())
