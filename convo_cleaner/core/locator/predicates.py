"""Named node predicates

Predicates are plain, independently testable checks over a ``DomNode``
snapshot. Strategies combine them in a fixed precedence: semantic hooks
(test id, aria label) first, then accessible name or text matched against
the profile, then structural signatures for unlabeled icon buttons.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Union

from convo_cleaner.core.profile.views import LocalizationProfile
from convo_cleaner.perception.base import DomNode

NATIVE_CONTROL_TAGS = frozenset({'button', 'a', 'input', 'select', 'textarea', 'summary'})
INTERACTIVE_ROLES = frozenset({
	'button', 'menuitem', 'menuitemradio', 'menuitemcheckbox', 'link', 'option', 'tab', 'switch', 'checkbox'
})
SUPPRESSED_VISIBILITY = frozenset({'hidden', 'collapse'})
KEBAB_MAX_SIZE = 32

PatternLike = Union[str, re.Pattern]


def _as_pattern(value: PatternLike) -> re.Pattern:
	return value if isinstance(value, re.Pattern) else re.compile(value, re.IGNORECASE)


@dataclass(frozen=True)
class NodePredicate:
	name: str
	check: Callable[[DomNode, Optional[LocalizationProfile]], bool]

	def __call__(self, node: DomNode, profile: Optional[LocalizationProfile] = None) -> bool:
		return bool(self.check(node, profile))

	def __repr__(self) -> str:
		return f'NodePredicate({self.name})'


def _interactive(node: DomNode, profile: Optional[LocalizationProfile]) -> bool:
	role = (node.role or '').lower()
	return node.tag in NATIVE_CONTROL_TAGS or role in INTERACTIVE_ROLES or node.has_handler


def _visible(node: DomNode, profile: Optional[LocalizationProfile]) -> bool:
	if not node.box.has_area:
		return False
	if node.disabled or node.aria_disabled:
		return False
	if (node.visibility or '').lower() in SUPPRESSED_VISIBILITY:
		return False
	return (node.display or '').lower() != 'none'


is_interactive = NodePredicate('interactive', _interactive)
is_visible = NodePredicate('visible', _visible)


def matches_test_id(pattern: PatternLike) -> NodePredicate:
	regex = _as_pattern(pattern)
	return NodePredicate(f'test_id~{regex.pattern}', lambda node, profile: bool(node.test_id and regex.search(node.test_id)))


def matches_aria_label(pattern: PatternLike) -> NodePredicate:
	regex = _as_pattern(pattern)
	return NodePredicate(f'aria~{regex.pattern}', lambda node, profile: bool(node.aria_label and regex.search(node.aria_label)))


def matches_label(pattern: PatternLike) -> NodePredicate:
	"""Any accessible name source (aria label, title, text) matches"""
	regex = _as_pattern(pattern)

	def check(node: DomNode, profile: Optional[LocalizationProfile]) -> bool:
		return any(regex.search(candidate.strip()) for candidate in node.label_candidates())

	return NodePredicate(f'label~{regex.pattern}', check)


def _profile_label(kind: str) -> NodePredicate:
	def check(node: DomNode, profile: Optional[LocalizationProfile]) -> bool:
		if profile is None:
			return False
		matcher = getattr(profile, f'matches_{kind}')
		return any(matcher(candidate) for candidate in node.label_candidates())

	return NodePredicate(f'profile_{kind}', check)


matches_menu_item_text = _profile_label('menu_item')
matches_confirm_text = _profile_label('confirm')


def _kebab_shape(node: DomNode, profile: Optional[LocalizationProfile]) -> bool:
	svg = node.svg
	if svg is None or not svg.is_square or svg.width > KEBAB_MAX_SIZE:
		return False
	if svg.circles == 3:
		return True
	if 1 <= svg.paths <= 3 and svg.path_boxes:
		first = svg.path_boxes[0]
		return all(box[0] == first[0] and box[1] == first[1] for box in svg.path_boxes)
	return False


looks_like_kebab = NodePredicate('kebab_shape', _kebab_shape)


IMPLICIT_ROLES = {'button': 'button', 'a': 'link', 'summary': 'button'}


def effective_role(node: DomNode) -> str:
	return (node.role or IMPLICIT_ROLES.get(node.tag, '')).lower()


def has_role(*roles: str) -> NodePredicate:
	"""Explicit role, or the implicit one of native buttons and links"""
	wanted = {role.lower() for role in roles}
	return NodePredicate(f"role={'|'.join(sorted(wanted))}", lambda node, profile: effective_role(node) in wanted)


def in_scope(scope: str) -> NodePredicate:
	"""Node sits inside the named landmark; 'document' accepts everything"""
	if scope == 'document':
		return NodePredicate('in_document', lambda node, profile: True)
	return NodePredicate(f'in_{scope}', lambda node, profile: node.in_container(scope))


def outside_scope(scope: str) -> NodePredicate:
	return NodePredicate(f'outside_{scope}', lambda node, profile: not node.in_container(scope))


def all_of(*predicates: NodePredicate) -> NodePredicate:
	name = '&'.join(p.name for p in predicates)
	return NodePredicate(name, lambda node, profile: all(p(node, profile) for p in predicates))


def any_of(*predicates: NodePredicate) -> NodePredicate:
	name = '|'.join(p.name for p in predicates)
	return NodePredicate(f'({name})', lambda node, profile: any(p(node, profile) for p in predicates))


def is_candidate(node: DomNode, profile: Optional[LocalizationProfile] = None) -> bool:
	"""Only interactive and visible nodes are ever returned by the locator"""
	return is_interactive(node, profile) and is_visible(node, profile)
