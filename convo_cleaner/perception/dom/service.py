"""Snapshot passes over the rendered tree, including shadow roots and child frames"""

import logging
from typing import Any, Optional

from playwright.async_api import Frame, Page
from uuid_extensions import uuid7str

from convo_cleaner.perception.base import FrameSnapshot

logger = logging.getLogger(__name__)

REF_ATTRIBUTE = 'data-cc-ref'

# One synchronous pass: stamps every candidate with a per-pass token and
# returns plain data. Open shadow roots are walked inline; child frames are
# visited from Python because they are separate execution contexts.
SNAPSHOT_SCRIPT = """
({ gen, attr }) => {
	const NATIVE = new Set(['button', 'a', 'input', 'select', 'textarea', 'summary']);
	const ROLES = new Set(['button', 'menuitem', 'menuitemradio', 'menuitemcheckbox', 'link', 'option', 'tab', 'switch', 'checkbox']);
	const HEADER_SELECTORS = [
		'[data-testid*="conversation"] header',
		'[data-testid*="thread"] header',
		'header[data-testid*="conversation" i]',
		'[data-testid*="view-header" i]',
		'[data-testid*="conversation-header" i]',
		'[data-testid="toolbar"]',
		'header'
	];
	const SIDEBAR_SELECTORS = [
		'[aria-selected="true"][data-testid*="conversation" i]',
		'[data-testid*="conversation-item" i][data-selected="true"]',
		'nav [aria-selected="true"][role="option"]',
		'nav [aria-current="true"]',
		'nav [aria-current="page"]'
	];
	const OVERLAY = 'dialog,[role="dialog"],[role="alertdialog"],[aria-modal="true"],[data-state="open"]';

	const main = document.querySelector('[role="main"]') || document.querySelector('main');
	const firstMatch = (root, selectors) => {
		for (const selector of selectors) {
			const found = root && root.querySelector(selector);
			if (found) return found;
		}
		return null;
	};
	const header = firstMatch(main, HEADER_SELECTORS) || firstMatch(document, HEADER_SELECTORS);
	const sidebarItem = firstMatch(document, SIDEBAR_SELECTORS);

	const parentOf = (el) => el.parentElement || (el.getRootNode && el.getRootNode().host) || null;
	const closestComposed = (el, selector) => {
		for (let cur = el; cur; cur = parentOf(cur)) {
			if (cur.matches && cur.matches(selector)) return cur;
		}
		return null;
	};
	const within = (el, ancestor) => {
		if (!ancestor) return false;
		for (let cur = el; cur; cur = parentOf(cur)) {
			if (cur === ancestor) return true;
		}
		return false;
	};
	const isCandidate = (el) => {
		const tag = el.tagName.toLowerCase();
		const role = (el.getAttribute('role') || '').toLowerCase();
		if (tag === 'a' && !el.hasAttribute('href') && !role) return false;
		return NATIVE.has(tag) || ROLES.has(role) || typeof el.onclick === 'function' || el.hasAttribute('onclick');
	};
	const svgSignature = (el) => {
		const svg = el.querySelector('svg');
		if (!svg) return null;
		const rect = svg.getBoundingClientRect();
		const paths = Array.from(svg.querySelectorAll('path'));
		const boxes = [];
		for (const path of paths.slice(0, 4)) {
			try {
				const b = path.getBBox();
				boxes.push([Math.round(b.width * 10) / 10, Math.round(b.height * 10) / 10]);
			} catch (_e) {
				boxes.push([0, 0]);
			}
		}
		return {
			width: rect.width, height: rect.height,
			circles: svg.querySelectorAll('circle').length,
			paths: paths.length, path_boxes: boxes
		};
	};
	const describe = (el, index) => {
		const style = window.getComputedStyle(el);
		const rect = el.getBoundingClientRect();
		const overlay = closestComposed(el, OVERLAY) || el;
		const z = Number.parseFloat(window.getComputedStyle(overlay).zIndex);
		const containers = [];
		if (within(el, main)) containers.push('main');
		if (within(el, header)) containers.push('header');
		if (within(el, sidebarItem)) containers.push('sidebar_selected');
		if (closestComposed(el, '[role="menu"]')) containers.push('menu');
		if (closestComposed(el, OVERLAY)) containers.push('dialog');
		if (closestComposed(el, 'nav')) containers.push('nav');
		const ref = `${gen}-${index}`;
		el.setAttribute(attr, ref);
		return {
			ref, index,
			tag: el.tagName.toLowerCase(),
			element_id: el.id || null,
			classes: Array.from(el.classList || []).slice(0, 3),
			role: el.getAttribute('role'),
			test_id: el.getAttribute('data-testid'),
			aria_label: el.getAttribute('aria-label'),
			title: el.getAttribute('title'),
			text: (el.textContent || '').trim().slice(0, 200),
			disabled: el.hasAttribute('disabled') || el.disabled === true,
			aria_disabled: el.getAttribute('aria-disabled') === 'true',
			visibility: style.visibility,
			display: style.display,
			has_handler: typeof el.onclick === 'function' || el.hasAttribute('onclick'),
			box: { x: rect.x, y: rect.y, width: rect.width, height: rect.height },
			svg: svgSignature(el),
			stacking: Number.isFinite(z) ? z : 0,
			containers
		};
	};

	const nodes = [];
	const walk = (root) => {
		const walker = document.createTreeWalker(root, NodeFilter.SHOW_ELEMENT);
		let current = walker.nextNode();
		while (current) {
			if (isCandidate(current)) nodes.push(describe(current, nodes.length));
			if (current.shadowRoot) walk(current.shadowRoot);
			current = walker.nextNode();
		}
	};
	if (document.documentElement) walk(document.documentElement);
	return { url: window.location.href, nodes };
}
"""


def frame_tree(page: Page) -> list[Frame]:
	"""Main frame first, then child frames depth-first"""
	ordered: list[Frame] = []

	def visit(frame: Frame) -> None:
		ordered.append(frame)
		for child in frame.child_frames:
			visit(child)

	visit(page.main_frame)
	return ordered


class DomSnapshotter:
	"""Captures candidate nodes of every frame in one pass"""

	def __init__(self, ref_attribute: str = REF_ATTRIBUTE):
		self.ref_attribute = ref_attribute

	async def snapshot(self, page: Page) -> list[tuple[Frame, FrameSnapshot]]:
		generation = uuid7str()[-12:]
		results: list[tuple[Frame, FrameSnapshot]] = []
		for order, frame in enumerate(frame_tree(page)):
			snapshot = await self.snapshot_frame(frame, generation, order)
			if snapshot is not None:
				results.append((frame, snapshot))
		return results

	async def snapshot_frame(self, frame: Frame, generation: str, order: int) -> Optional[FrameSnapshot]:
		try:
			raw: Any = await frame.evaluate(SNAPSHOT_SCRIPT, {'gen': f'{generation}f{order}', 'attr': self.ref_attribute})
		except Exception as e:
			# Detached or cross-origin frames are skipped for this pass
			logger.debug(f"Snapshot of frame {order} failed: {e}")
			return None
		if not isinstance(raw, dict):
			return None
		return FrameSnapshot(frame_order=order, url=raw.get('url') or '', nodes=raw.get('nodes') or [])
