"""Locale-driven profile resolution"""

import logging
import re
from typing import Any, Iterable, Optional, Sequence

from playwright.async_api import Page

from convo_cleaner.core.profile.views import LocalizationProfile, ProfileMatcher

logger = logging.getLogger(__name__)

# Document language first, then platform languages
LOCALE_SIGNALS_SCRIPT = """
() => {
	const out = [];
	const docLang = document.documentElement && document.documentElement.lang;
	if (docLang) out.push(docLang);
	if (Array.isArray(navigator.languages)) out.push(...navigator.languages);
	if (navigator.language) out.push(navigator.language);
	return out;
}
"""


def compile_patterns(values: Iterable[Any]) -> tuple[re.Pattern, ...]:
	"""Compile strings to case-insensitive patterns, dropping invalid ones"""
	compiled = []
	for value in values or ():
		if isinstance(value, re.Pattern):
			compiled.append(value)
			continue
		try:
			compiled.append(re.compile(str(value), re.IGNORECASE))
		except re.error as e:
			logger.warning(f"Dropping invalid profile pattern {value!r}: {e}")
	return tuple(compiled)


PROFILE_SK_CZ = LocalizationProfile(
	id='sk-cz',
	menu_item_patterns=compile_patterns([
		r'^(odstrániť|odstranit)$', r'^(zmazať|zmazat)$', r'^(smazat|odstranit konverzaci)$'
	]),
	confirm_patterns=compile_patterns([
		r'^(odstrániť|odstranit)$', r'^(zmazať|zmazat)$', r'^(áno, odstrániť|ano, odstranit)$', r'^smazat$'
	]),
	success_patterns=compile_patterns([r'odstránen', r'odstranen', r'zmazan', r'smazán'])
)

PROFILE_DEFAULT = LocalizationProfile(
	id='default',
	menu_item_patterns=compile_patterns([r'^(delete|delete chat|delete conversation)$', r'^remove$']),
	confirm_patterns=compile_patterns([r'^(delete|delete conversation)$', r'^(yes, delete|confirm delete)$']),
	success_patterns=compile_patterns([r'deleted', r'removed'])
)


def _is_sk_cz(signals: Sequence[str]) -> bool:
	return any(re.match(r'^(sk|cs|cz)', code) for code in signals)


def default_matchers() -> list[ProfileMatcher]:
	return [
		ProfileMatcher(name='sk-cz', predicate=_is_sk_cz, profile=PROFILE_SK_CZ),
		ProfileMatcher(name='default', predicate=lambda signals: True, profile=PROFILE_DEFAULT),
	]


def normalize_signals(signals: Iterable[Any]) -> list[str]:
	normalized = []
	for code in signals or ():
		value = str(code or '').strip().lower()
		if value:
			normalized.append(value)
	return normalized


def apply_overrides(profile: LocalizationProfile, overrides: Optional[dict[str, list[str]]]) -> LocalizationProfile:
	"""Replace individual pattern lists; empty or fully invalid lists keep the defaults"""
	if not overrides:
		return profile
	updates = {}
	for key, values in overrides.items():
		compiled = compile_patterns(values)
		if compiled:
			updates[key] = compiled
	if not updates:
		return profile
	return profile.model_copy(update=updates)


class ProfileResolver:
	"""Picks the first profile whose matcher accepts the locale signals

	The matcher list must end with a catch-all; resolution never fails.
	"""

	def __init__(self, matchers: Optional[list[ProfileMatcher]] = None):
		self.matchers = matchers or default_matchers()

	def resolve(self, locale_signals: Sequence[str]) -> LocalizationProfile:
		signals = normalize_signals(locale_signals)
		for matcher in self.matchers:
			if matcher.matches(signals):
				logger.debug(f"Profile '{matcher.profile.id}' selected by matcher '{matcher.name}' for {signals}")
				return matcher.profile
		# Only reachable when the caller supplied a list without a catch-all
		fallback = self.matchers[-1]
		logger.warning(f"No profile matcher accepted {signals}; using '{fallback.profile.id}'")
		return fallback.profile

	async def resolve_for_page(
		self,
		page: Page,
		extra_signals: Optional[Sequence[str]] = None,
		overrides: Optional[dict[str, list[str]]] = None
	) -> LocalizationProfile:
		"""Gather signals from the page, resolve and apply configured overrides"""
		signals = await collect_locale_signals(page)
		signals.extend(normalize_signals(extra_signals or []))
		return apply_overrides(self.resolve(signals), overrides)


async def collect_locale_signals(page: Page) -> list[str]:
	try:
		raw = await page.evaluate(LOCALE_SIGNALS_SCRIPT)
	except Exception as e:
		logger.debug(f"Locale signal collection failed: {e}")
		return []
	return normalize_signals(raw if isinstance(raw, list) else [])
