"""Logging setup for the CLI and scripts"""

import logging
import os
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_LEVEL_ENV = 'CONVO_CLEANER_LOG_LEVEL'


def setup_logging(level: Optional[str] = None) -> logging.Logger:
	"""Configure root logging once and return the package logger

	The level comes from the argument, then CONVO_CLEANER_LOG_LEVEL, then INFO.
	Third-party loggers that are chatty at debug level are kept at WARNING.
	"""
	level_name = (level or os.getenv(LOG_LEVEL_ENV) or 'INFO').upper()
	numeric_level = getattr(logging, level_name, logging.INFO)

	root = logging.getLogger()
	if not root.handlers:
		logging.basicConfig(level=numeric_level, format=LOG_FORMAT)
	else:
		root.setLevel(numeric_level)

	for noisy in ('asyncio', 'playwright'):
		logging.getLogger(noisy).setLevel(logging.WARNING)

	package_logger = logging.getLogger('convo_cleaner')
	package_logger.setLevel(numeric_level)
	return package_logger
