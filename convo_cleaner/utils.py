"""Shared helpers"""

import asyncio
import logging
import time
from functools import wraps
from typing import Any, Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

R = TypeVar('R')


def time_execution_async(label: str = '') -> Callable[[Callable[..., Awaitable[R]]], Callable[..., Awaitable[R]]]:
	"""Log how long an async call took at debug level"""
	def decorator(func: Callable[..., Awaitable[R]]) -> Callable[..., Awaitable[R]]:
		@wraps(func)
		async def wrapper(*args: Any, **kwargs: Any) -> R:
			start_time = time.monotonic()
			try:
				return await func(*args, **kwargs)
			finally:
				elapsed = time.monotonic() - start_time
				logger.debug(f'{label or func.__name__}() took {elapsed:.2f}s')
		return wrapper
	return decorator


async def sleep_ms(ms: float) -> None:
	"""Cooperative delay in milliseconds"""
	await asyncio.sleep(max(0.0, ms) / 1000)


def truncate(value: Optional[str], limit: int) -> str:
	text = (value or '').strip()
	return text[:limit]
