"""Shared fixtures: an in-memory page that answers the engine's scripts"""

import asyncio
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock

import pytest

from convo_cleaner.config import CleanerConfig
from convo_cleaner.core.context import AutomationContext
from convo_cleaner.core.profile.service import LOCALE_SIGNALS_SCRIPT, PROFILE_DEFAULT
from convo_cleaner.core.verification.service import TOAST_SCRIPT
from convo_cleaner.perception.dom.service import SNAPSHOT_SCRIPT
from convo_cleaner.session.service import DISMISS_DRAFT_SCRIPT, GUARD_SCRIPT

CONVO_URL = 'https://chatgpt.com/c/abc123/'
REF_SELECTOR = re.compile(r'\[data-cc-ref="([^"]+)"\]')

KEBAB_SVG = {'width': 20, 'height': 20, 'circles': 3, 'paths': 0, 'path_boxes': []}


@dataclass(eq=False)
class FakeElement:
	tag: str = 'button'
	text: str = ''
	role: Optional[str] = None
	test_id: Optional[str] = None
	aria_label: Optional[str] = None
	title: Optional[str] = None
	containers: tuple[str, ...] = ()
	stacking: float = 0
	svg: Optional[dict[str, Any]] = None
	box: dict[str, float] = field(default_factory=lambda: {'x': 0, 'y': 0, 'width': 24, 'height': 24})
	disabled: bool = False
	aria_disabled: bool = False
	visibility: str = 'visible'
	display: str = 'block'
	has_handler: bool = False
	on_click: Optional[Callable[['FakePage'], None]] = None
	events: list[str] = field(default_factory=list)

	@property
	def clicked(self) -> bool:
		return 'click' in self.events

	def to_node(self, ref: str, index: int) -> dict[str, Any]:
		return {
			'ref': ref, 'index': index, 'tag': self.tag, 'role': self.role, 'test_id': self.test_id,
			'aria_label': self.aria_label, 'title': self.title, 'text': self.text,
			'disabled': self.disabled, 'aria_disabled': self.aria_disabled,
			'visibility': self.visibility, 'display': self.display, 'has_handler': self.has_handler,
			'box': dict(self.box), 'svg': self.svg, 'stacking': self.stacking, 'containers': list(self.containers)
		}


class FakeHandle:
	def __init__(self, element: FakeElement, page: 'FakePage'):
		self.element = element
		self.page = page

	async def focus(self) -> None:
		self.element.events.append('focus')

	async def dispatch_event(self, event: str, init: Optional[dict[str, Any]] = None) -> None:
		self.element.events.append(event)
		self.page.dispatched.append((self.element, event, init))
		if event == 'click' and self.element.on_click is not None:
			self.element.on_click(self.page)


class FakeFrame:
	def __init__(self, page: 'FakePage', elements: Optional[list[FakeElement]] = None):
		self.page = page
		self.elements: list[FakeElement] = elements if elements is not None else []
		self.child_frames: list['FakeFrame'] = []
		self._refs: dict[str, FakeElement] = {}

	async def evaluate(self, script: str, arg: Any = None) -> Any:
		if script == SNAPSHOT_SCRIPT:
			self.page.snapshot_count += 1
			nodes = []
			for index, element in enumerate(self.elements):
				ref = f"{arg['gen']}-{index}"
				self._refs[ref] = element
				nodes.append(element.to_node(ref, index))
			return {'url': self.page.url, 'nodes': nodes}
		return await self.page.evaluate(script, arg)

	async def query_selector(self, selector: str) -> Optional[FakeHandle]:
		match = REF_SELECTOR.search(selector)
		if not match:
			return None
		element = self._refs.get(match.group(1))
		if element is None or element not in self.elements:
			return None
		return FakeHandle(element, self.page)


class FakeKeyboard:
	def __init__(self, page: 'FakePage'):
		self.page = page
		self.pressed: list[str] = []

	async def press(self, key: str) -> None:
		self.pressed.append(key)
		if key == 'Escape':
			self.page.close_overlays()


class FakePage:
	"""Stands in for a Playwright page; scripts are answered by identity"""

	def __init__(self, url: str = CONVO_URL, elements: Optional[list[FakeElement]] = None):
		self.url = url
		self.main_frame = FakeFrame(self, elements)
		self.keyboard = FakeKeyboard(self)
		self.guard_state: dict[str, bool] = {'logged_out': False, 'shell': True, 'main': True, 'draft_banner': False}
		self.locales: list[str] = ['en-US', 'en']
		self.toast: Optional[dict[str, Any]] = None
		self.dispatched: list[tuple[FakeElement, str, Any]] = []
		self.snapshot_count = 0
		self.closed = False

	@property
	def elements(self) -> list[FakeElement]:
		return self.main_frame.elements

	def mount(self, *elements: FakeElement) -> None:
		self.elements.extend(elements)

	def unmount(self, predicate: Callable[[FakeElement], bool]) -> None:
		self.main_frame.elements[:] = [e for e in self.elements if not predicate(e)]

	def close_overlays(self) -> None:
		self.unmount(lambda e: 'menu' in e.containers or 'dialog' in e.containers)

	def navigate_later(self, url: str, delay: float) -> None:
		asyncio.get_running_loop().call_later(delay, setattr, self, 'url', url)

	def is_closed(self) -> bool:
		return self.closed

	async def evaluate(self, script: str, arg: Any = None) -> Any:
		if script == SNAPSHOT_SCRIPT:
			return await self.main_frame.evaluate(script, arg)
		if script == GUARD_SCRIPT:
			return dict(self.guard_state)
		if script == DISMISS_DRAFT_SCRIPT:
			self.guard_state['draft_banner'] = False
			return {'tag': 'button', 'label': 'Close', 'text': ''}
		if script == LOCALE_SIGNALS_SCRIPT:
			return list(self.locales)
		if script == TOAST_SCRIPT:
			return self.toast
		raise AssertionError(f'Unexpected script: {script[:40]!r}')


# Page builders

def share_button() -> FakeElement:
	return FakeElement(aria_label='Share', text='Share', test_id='share-chat-button', containers=('main', 'header'))


def kebab_button(on_click: Optional[Callable[[FakePage], None]] = None) -> FakeElement:
	return FakeElement(
		aria_label='Open conversation options', test_id='conversation-options-button',
		svg=dict(KEBAB_SVG), containers=('main', 'header'), on_click=on_click
	)


def menu_item(text: str, on_click: Optional[Callable[[FakePage], None]] = None) -> FakeElement:
	return FakeElement(tag='div', role='menuitem', text=text, containers=('menu',), stacking=50, on_click=on_click)


def dialog_button(text: str, on_click: Optional[Callable[[FakePage], None]] = None, test_id: Optional[str] = None) -> FakeElement:
	return FakeElement(text=text, test_id=test_id, containers=('dialog',), stacking=100, on_click=on_click)


def build_chat_page(
	delete_label: Optional[str] = 'Delete',
	confirm_label: str = 'Delete',
	navigate_to: Optional[str] = 'https://chatgpt.com/',
	navigate_delay: float = 0.03
) -> FakePage:
	"""Conversation view whose menu, dialog and navigation react to clicks

	``delete_label=None`` builds a menu without a destructive item.
	``navigate_to=None`` keeps the page where it is after confirmation.
	"""
	page = FakePage()

	def confirm_clicked(p: FakePage) -> None:
		p.close_overlays()
		if navigate_to is not None:
			p.navigate_later(navigate_to, navigate_delay)

	def delete_clicked(p: FakePage) -> None:
		p.close_overlays()
		p.mount(
			dialog_button('Cancel', test_id='cancel-button'),
			dialog_button(confirm_label, on_click=confirm_clicked, test_id='delete-conversation-confirm-button')
		)

	def kebab_clicked(p: FakePage) -> None:
		items = [menu_item('Archive')]
		if delete_label is not None:
			items.append(menu_item(delete_label, on_click=delete_clicked))
		p.mount(*items)

	page.mount(
		FakeElement(tag='a', text='New chat', containers=('nav',)),
		share_button(),
		kebab_button(on_click=kebab_clicked)
	)
	return page


# Fixtures

@pytest.fixture
def fast_config() -> CleanerConfig:
	"""Live mode with near-zero pacing"""
	return CleanerConfig(
		step_timeout_ms=500,
		max_retries=1,
		dry_run=False,
		inter_target_delay_ms=0,
		jitter_range_ms=(0, 0),
		rate_limit_per_minute=0,
		poll_interval_ms=5,
		retry_delay_ms=0,
		wait_after_open_ms=0,
		wait_after_click_ms=0,
		dry_run_lookup_timeout_ms=20
	)


@pytest.fixture
def dry_config(fast_config) -> CleanerConfig:
	return fast_config.model_copy(update={'dry_run': True})


@pytest.fixture
def chat_page() -> FakePage:
	return build_chat_page()


@pytest.fixture
def make_ctx(fast_config):
	def factory(page: FakePage, config: Optional[CleanerConfig] = None) -> AutomationContext:
		return AutomationContext(page=page, config=config or fast_config, profile=PROFILE_DEFAULT)
	return factory


@pytest.fixture
def mock_browser_context():
	"""Playwright BrowserContext stand-in for session tests"""
	context = AsyncMock()
	context.pages = []
	return context
