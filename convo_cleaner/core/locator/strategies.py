"""Ordered lookup strategies for the controls of the delete flow"""

import re

from convo_cleaner.core.locator.predicates import (
	all_of, has_role, looks_like_kebab, matches_aria_label,
	matches_confirm_text, matches_label, matches_menu_item_text, matches_test_id, outside_scope
)
from convo_cleaner.core.locator.views import Scope, Strategy

SHARE_REGEX = re.compile(r'(share|zdieľať|sdílet)', re.IGNORECASE)
KEBAB_LABEL_REGEX = re.compile(r'(more|actions|options|menu)', re.IGNORECASE)
DESTRUCTIVE_TEST_ID_REGEX = re.compile(r'(delete|remove)', re.IGNORECASE)


def share_strategies() -> list[Strategy]:
	return [
		Strategy('header:test_id=share', Scope.HEADER, matches_test_id(r'share')),
		Strategy('header:label=share', Scope.HEADER, matches_label(SHARE_REGEX)),
		Strategy('main:label=share', Scope.MAIN, matches_label(SHARE_REGEX)),
	]


def kebab_strategies() -> list[Strategy]:
	"""Near the primary action first, then the main region, then the selected sidebar item"""
	return [
		Strategy('header:aria=conversation actions', Scope.HEADER, matches_aria_label(r'conversation actions')),
		Strategy('header:button=more', Scope.HEADER, all_of(has_role('button'), matches_label(KEBAB_LABEL_REGEX))),
		Strategy('header:test_id=actions', Scope.HEADER, matches_test_id(r'(conversation-options|actions|more)')),
		Strategy('header:shape=kebab', Scope.HEADER, looks_like_kebab),
		Strategy('main:test_id=actions', Scope.MAIN, matches_test_id(r'(conversation-options|actions)')),
		Strategy('main:shape=kebab', Scope.MAIN, looks_like_kebab),
		Strategy('sidebar:aria=more', Scope.SIDEBAR_SELECTED, matches_aria_label(r'(more|actions|options)')),
		Strategy('sidebar:shape=kebab', Scope.SIDEBAR_SELECTED, looks_like_kebab),
	]


def delete_strategies() -> list[Strategy]:
	"""Open menus first, then anywhere in the document"""
	return [
		Strategy('menu:menuitem=profile', Scope.MENU, all_of(has_role('menuitem'), matches_menu_item_text)),
		Strategy('menu:test_id=delete', Scope.MENU, matches_test_id(DESTRUCTIVE_TEST_ID_REGEX)),
		Strategy('document:text=profile', Scope.DOCUMENT, matches_menu_item_text),
	]


def confirm_strategies() -> list[Strategy]:
	"""Visible dialogs first, then anywhere outside open menus; ranking picks the topmost"""
	return [
		Strategy('dialog:button=profile', Scope.DIALOG, all_of(has_role('button'), matches_confirm_text)),
		Strategy('dialog:text=profile', Scope.DIALOG, matches_confirm_text),
		Strategy('dialog:test_id=confirm', Scope.DIALOG, matches_test_id(r'confirm')),
		Strategy('document:text=profile', Scope.DOCUMENT, all_of(outside_scope('menu'), matches_confirm_text)),
	]


def cancel_strategies() -> list[Strategy]:
	return [
		Strategy('dialog:test_id=cancel', Scope.DIALOG, matches_test_id(r'cancel')),
		Strategy('dialog:label=cancel', Scope.DIALOG, matches_label(r'^(cancel|zrušiť|zrušit|close)$')),
	]
