"""Synthetic activation of located controls"""

import logging
from typing import Optional

from playwright.async_api import ElementHandle

from convo_cleaner.core.context import AutomationContext
from convo_cleaner.core.executor.views import ActionResult, ActionType
from convo_cleaner.core.locator.service import ElementLocator
from convo_cleaner.core.locator.strategies import cancel_strategies
from convo_cleaner.core.locator.views import ElementRef
from convo_cleaner.exceptions import ElementMissingError

logger = logging.getLogger(__name__)

HOVER_EVENTS = ('pointerover', 'mouseover', 'pointerenter', 'mouseenter')
PRESS_EVENTS = ('pointerdown', 'mousedown', 'pointerup', 'mouseup', 'click')
EVENT_INIT = {'bubbles': True, 'cancelable': True, 'button': 0}
DISMISS_SETTLE_MS = 50


class ActionExecutor:
	"""Dispatches pointer and mouse event sequences; never verifies the effect"""

	def __init__(self, locator: Optional[ElementLocator] = None):
		self.locator = locator or ElementLocator()

	async def _handle(self, ref: Optional[ElementRef]) -> ElementHandle:
		if ref is None:
			raise ElementMissingError("No element to act on", detail='no_ref')
		handle = await ref.resolve()
		if handle is None:
			raise ElementMissingError(
				f"Element {ref.node.ref} is gone", detail='stale_ref', evidence={'element': ref.describe()}
			)
		return handle

	@staticmethod
	async def _dispatch(handle: ElementHandle, events: tuple[str, ...]) -> None:
		for event in events:
			await handle.dispatch_event(event, EVENT_INIT)

	async def activate(self, ctx: AutomationContext, ref: Optional[ElementRef]) -> ActionResult:
		handle = await self._handle(ref)
		try:
			await handle.focus()
		except Exception as e:
			logger.debug(f"Focus failed, continuing: {e}")
		await self._dispatch(handle, HOVER_EVENTS)
		await self._dispatch(handle, PRESS_EVENTS)
		logger.debug(f"Activated {ref.describe()}")
		return ActionResult(action_type=ActionType.ACTIVATE, events=HOVER_EVENTS + PRESS_EVENTS, element=ref.describe())

	async def hover(self, ctx: AutomationContext, ref: Optional[ElementRef]) -> ActionResult:
		handle = await self._handle(ref)
		await self._dispatch(handle, HOVER_EVENTS)
		return ActionResult(action_type=ActionType.HOVER, events=HOVER_EVENTS, element=ref.describe())

	async def dismiss_open(self, ctx: AutomationContext) -> ActionResult:
		"""Close whatever menu or dialog is open with Escape"""
		try:
			await ctx.page.keyboard.press('Escape')
		except Exception as e:
			logger.debug(f"Escape dismissal failed: {e}")
		await ctx.pause(DISMISS_SETTLE_MS)
		return ActionResult(action_type=ActionType.KEYBOARD, events=('Escape',))

	async def dismiss_dialog(self, ctx: AutomationContext) -> ActionResult:
		"""Press the dialog's cancel control, or Escape when there is none"""
		result = await self.locator.locate(ctx, cancel_strategies(), timeout_ms=0)
		if result.found:
			try:
				return await self.activate(ctx, result.ref)
			except ElementMissingError as e:
				logger.debug(f"Cancel control vanished: {e}")
		return await self.dismiss_open(ctx)
