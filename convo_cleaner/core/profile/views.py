"""Localization profile data models"""

import re
from dataclasses import dataclass
from typing import Callable, Sequence

from pydantic import BaseModel, ConfigDict, Field


class LocalizationProfile(BaseModel):
	"""Text patterns used to recognize menu items, confirmations and success toasts"""
	model_config = ConfigDict(extra='forbid', frozen=True, arbitrary_types_allowed=True)

	id: str = Field(description="Profile identifier, e.g. 'default' or 'sk-cz'")
	menu_item_patterns: tuple[re.Pattern, ...] = Field(description="Destructive menu item labels")
	confirm_patterns: tuple[re.Pattern, ...] = Field(description="Confirmation button labels")
	success_patterns: tuple[re.Pattern, ...] = Field(description="Success message texts")

	def matches_menu_item(self, text: str) -> bool:
		return _any_match(self.menu_item_patterns, text)

	def matches_confirm(self, text: str) -> bool:
		return _any_match(self.confirm_patterns, text)

	def matches_success(self, text: str) -> bool:
		return _any_match(self.success_patterns, text)

	def success_sources(self) -> list[str]:
		"""Pattern sources for matching inside the page"""
		return [pattern.pattern for pattern in self.success_patterns]


@dataclass(frozen=True)
class ProfileMatcher:
	"""Selects a profile when its predicate accepts the locale signals"""
	name: str
	predicate: Callable[[Sequence[str]], bool]
	profile: LocalizationProfile

	def matches(self, signals: Sequence[str]) -> bool:
		return bool(self.predicate(signals))


def _any_match(patterns: Sequence[re.Pattern], text: str) -> bool:
	value = (text or '').strip()
	if not value:
		return False
	return any(pattern.search(value) for pattern in patterns)
