from dataclasses import dataclass
from urllib.parse import urlsplit

from playwright.async_api import Page
from pydantic import BaseModel, ConfigDict


class GuardState(BaseModel):
	model_config = ConfigDict(extra='ignore')

	logged_out: bool = False
	shell: bool = False
	main: bool = False
	draft_banner: bool = False

	@property
	def ready(self) -> bool:
		return self.shell and self.main and not self.logged_out


@dataclass
class BrowserSession:
	"""A page opened for one target"""
	page: Page
	canonical_url: str

	@staticmethod
	def host_of(url: str) -> str:
		return (urlsplit(url or '').hostname or '').lower()
