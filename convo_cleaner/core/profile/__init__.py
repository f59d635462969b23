from .service import (
	PROFILE_DEFAULT, PROFILE_SK_CZ, ProfileResolver,
	apply_overrides, collect_locale_signals, compile_patterns, default_matchers
)
from .views import LocalizationProfile, ProfileMatcher

__all__ = [
	'LocalizationProfile', 'ProfileMatcher', 'ProfileResolver',
	'PROFILE_DEFAULT', 'PROFILE_SK_CZ',
	'apply_overrides', 'collect_locale_signals', 'compile_patterns', 'default_matchers'
]
