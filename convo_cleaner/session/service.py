"""Collaborators around the hosting page: readiness, page lookup and the execution boundary"""

import logging
import time
from typing import Any, Awaitable, Callable, Optional, TypeVar

from playwright.async_api import BrowserContext, Page
from playwright.async_api import Error as PlaywrightError

from convo_cleaner.config import CleanerConfig
from convo_cleaner.core.target.views import canonicalize_url
from convo_cleaner.exceptions import AutomationError, ExecutionError, GuardFailedError, HostMismatchError
from convo_cleaner.session.views import BrowserSession, GuardState
from convo_cleaner.utils import sleep_ms

logger = logging.getLogger(__name__)

T = TypeVar('T')

GUARD_SCRIPT = """
() => {
	const login = document.querySelector('a[href*="/login"], button[data-testid*="login" i]');
	const shell = document.querySelector('#__next, [data-testid*="app" i], [id*="root" i]');
	const main = document.querySelector('main, [role="main"]');
	const banner = document.querySelector('[data-testid*="draft"]');
	return {
		logged_out: Boolean(login),
		shell: Boolean(shell),
		main: Boolean(main),
		draft_banner: Boolean(banner && banner.querySelector('button, [role="button"]'))
	};
}
"""

DISMISS_DRAFT_SCRIPT = """
() => {
	const banner = document.querySelector('[data-testid*="draft"]');
	const close = banner && banner.querySelector('button, [role="button"]');
	if (!close) return null;
	const label = close.getAttribute('aria-label') || close.getAttribute('title') || '';
	close.click();
	return { tag: close.tagName.toLowerCase(), label, text: (close.textContent || '').trim().slice(0, 60) };
}
"""

DRAFT_SETTLE_MS = 120


class ReadinessGuard:
	"""Waits until the app shell and main region are rendered"""

	def __init__(self, poll_interval_ms: int = 120):
		self.poll_interval_ms = poll_interval_ms

	async def read_state(self, page: Page) -> GuardState:
		try:
			raw = await page.evaluate(GUARD_SCRIPT)
		except Exception as e:
			logger.debug(f"Guard probe failed: {e}")
			return GuardState()
		return GuardState(**raw) if isinstance(raw, dict) else GuardState()

	async def wait_ready(self, page: Page, timeout_ms: float) -> GuardState:
		deadline = time.monotonic() + timeout_ms / 1000
		draft_dismissed = False
		while True:
			state = await self.read_state(page)
			if state.logged_out:
				raise GuardFailedError("User not logged in", code='not_logged_in', evidence=state.model_dump())
			if state.draft_banner and not draft_dismissed:
				try:
					dismissed = await page.evaluate(DISMISS_DRAFT_SCRIPT)
				except PlaywrightError as e:
					raise GuardFailedError(
						f"Could not dismiss draft banner: {e}", detail='draft_banner', evidence=state.model_dump()
					) from e
				logger.info(f"Dismissed draft banner: {dismissed}")
				draft_dismissed = True
				await sleep_ms(DRAFT_SETTLE_MS)
				continue
			if state.ready:
				return state
			if time.monotonic() >= deadline:
				raise GuardFailedError("App shell never became ready", detail='app_shell_missing', evidence=state.model_dump())
			await sleep_ms(self.poll_interval_ms)


class SessionProvider:
	"""Finds or creates the page for a conversation inside one browser context"""

	def __init__(self, browser_context: BrowserContext, navigation_timeout_ms: float = 30000):
		self.browser_context = browser_context
		self.navigation_timeout_ms = navigation_timeout_ms

	def find_page(self, canonical_url: str) -> Optional[Page]:
		for page in self.browser_context.pages:
			if page.is_closed():
				continue
			if canonicalize_url(page.url) == canonical_url:
				return page
		return None

	async def open(self, canonical_url: str) -> BrowserSession:
		page = self.find_page(canonical_url)
		if page is None:
			page = await self.browser_context.new_page()
			logger.debug(f"Opening {canonical_url} in a new page")
			await page.goto(canonical_url, wait_until='domcontentloaded', timeout=self.navigation_timeout_ms)
		else:
			await page.bring_to_front()
			await page.wait_for_load_state('domcontentloaded')
		return BrowserSession(page=page, canonical_url=canonical_url)


class ExecutionRequester:
	"""Single request/response boundary for work run against a session's page"""

	def __init__(self, config: CleanerConfig):
		self.config = config

	def host_allowed(self, url: str) -> bool:
		host = BrowserSession.host_of(url)
		return any(host == allowed or host.endswith('.' + allowed) for allowed in self.config.allowed_hosts)

	async def request(self, session: BrowserSession, procedure: Callable[[Page], Awaitable[T]]) -> T:
		if session.page.is_closed():
			raise ExecutionError("Session page is closed", evidence={'url': session.canonical_url})
		url = session.page.url
		if not self.host_allowed(url):
			raise HostMismatchError(f"Unexpected origin {BrowserSession.host_of(url)}", evidence={'url': url})
		try:
			return await procedure(session.page)
		except AutomationError:
			raise
		except PlaywrightError as e:
			raise ExecutionError(f"Browser call failed: {e}", evidence={'url': url}) from e
		except Exception as e:
			raise ExecutionError(f"Procedure raised {type(e).__name__}: {e}", evidence={'url': url}) from e


async def run_in_session(
	provider: SessionProvider,
	requester: ExecutionRequester,
	canonical_url: str,
	procedure: Callable[[Page], Awaitable[Any]]
) -> Any:
	"""Open the page for a URL and run one procedure against it"""
	try:
		session = await provider.open(canonical_url)
	except PlaywrightError as e:
		raise ExecutionError(f"Could not open {canonical_url}: {e}") from e
	return await requester.request(session, procedure)
