from .predicates import (
	NodePredicate, all_of, any_of, has_role, in_scope, is_candidate, is_interactive, is_visible,
	looks_like_kebab, matches_aria_label, matches_confirm_text, matches_label, matches_menu_item_text,
	matches_test_id, outside_scope
)
from .service import ElementLocator, rank
from .strategies import cancel_strategies, confirm_strategies, delete_strategies, kebab_strategies, share_strategies
from .views import ElementRef, LocateResult, Scope, Strategy

__all__ = [
	'ElementLocator', 'ElementRef', 'LocateResult', 'NodePredicate', 'Scope', 'Strategy', 'rank',
	'all_of', 'any_of', 'has_role', 'in_scope', 'is_candidate', 'is_interactive', 'is_visible',
	'looks_like_kebab', 'matches_aria_label', 'matches_confirm_text', 'matches_label',
	'matches_menu_item_text', 'matches_test_id', 'outside_scope',
	'cancel_strategies', 'confirm_strategies', 'delete_strategies', 'kebab_strategies', 'share_strategies'
]
