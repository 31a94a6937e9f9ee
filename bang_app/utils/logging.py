"""Application-wide logging initialization

Call `initialize_logging()` once, before the app starts serving (main.py does).

Logging format:
    2026-01-01 12:00:00,000 - bang_app.services.registry - INFO - Registered redirect !aZ3k9
"""

import logging
import logging.config
from typing import Optional

from bang_app.config import settings


LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def initialize_logging(level: Optional[str] = None) -> None:
    log_level = (level or settings.log_level).upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'plain': {
                    'format': LOG_FORMAT,
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'plain',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {
                'bang_app': {
                    'level': log_level,
                    'handlers': ['stdout'],
                    'propagate': True,
                },
            },
        }
    )
