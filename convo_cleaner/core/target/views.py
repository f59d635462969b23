"""Target model and canonical address helpers"""

import re
from typing import Optional
from urllib.parse import urlsplit, urlunsplit

from pydantic import BaseModel, ConfigDict, Field

CONVERSATION_PATH_REGEX = re.compile(r'/c/([A-Za-z0-9][A-Za-z0-9_-]*)(?:/|$)')
DEFAULT_ORIGIN = 'https://chatgpt.com'


def canonicalize_url(url: Optional[str]) -> Optional[str]:
	"""Strip query and fragment and normalize to exactly one trailing slash

	Returns None when the input is not an absolute http(s) address.
	"""
	if not url or not isinstance(url, str):
		return None
	parts = urlsplit(url.strip())
	if parts.scheme not in ('http', 'https') or not parts.netloc:
		return None
	path = re.sub(r'/{2,}', '/', parts.path or '/').rstrip('/') + '/'
	return urlunsplit((parts.scheme, parts.netloc.lower(), path, '', ''))


def conversation_id_from_url(url: Optional[str]) -> Optional[str]:
	"""Extract the conversation id from a /c/<id> path segment"""
	if not url:
		return None
	path = urlsplit(url).path if '://' in url else url
	match = CONVERSATION_PATH_REGEX.search(path)
	return match.group(1) if match else None


def conversation_url(convo_id: str, origin: str = DEFAULT_ORIGIN) -> str:
	return f"{origin.rstrip('/')}/c/{convo_id}/"


class Target(BaseModel):
	"""One conversation the automation will act upon"""
	model_config = ConfigDict(extra='forbid', frozen=True)

	id: str = Field(default='', description="Conversation identifier")
	canonical_url: str = Field(default='', description="Normalized conversation address")

	@classmethod
	def from_url(cls, url: str) -> 'Target':
		"""Build a target from caller input; never raises

		Unresolvable input keeps the raw string so the caller can still see
		what was rejected.
		"""
		canonical = canonicalize_url(url)
		convo_id = conversation_id_from_url(canonical) if canonical else None
		if not canonical or not convo_id:
			return cls(id='', canonical_url=(url or '').strip())
		return cls(id=convo_id, canonical_url=canonical)

	@property
	def is_resolvable(self) -> bool:
		canonical = canonicalize_url(self.canonical_url)
		return bool(self.id) and canonical == self.canonical_url and conversation_id_from_url(canonical) == self.id

	@property
	def host(self) -> str:
		return urlsplit(self.canonical_url).hostname or ''

	def matches_location(self, url: Optional[str]) -> bool:
		"""True while the given address still points at this conversation"""
		if not url or not self.id:
			return False
		path = urlsplit(url).path
		return re.search(rf'/c/{re.escape(self.id)}(?:/|$)', path) is not None
