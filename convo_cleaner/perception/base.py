"""Snapshot models for nodes of the rendered tree"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class BoundingBox(BaseModel):
	"""Represents a bounding box for an element"""
	model_config = ConfigDict(extra='forbid')

	x: float = Field(default=0, description="X coordinate of top-left corner")
	y: float = Field(default=0, description="Y coordinate of top-left corner")
	width: float = Field(default=0, description="Width of the box")
	height: float = Field(default=0, description="Height of the box")

	@property
	def has_area(self) -> bool:
		return self.width > 0 and self.height > 0


class SvgSignature(BaseModel):
	"""Shape summary of the first graphic inside a control"""
	model_config = ConfigDict(extra='forbid')

	width: float = 0
	height: float = 0
	circles: int = 0
	paths: int = 0
	path_boxes: list[tuple[float, float]] = Field(default_factory=list, description="(width, height) of each path")

	@property
	def is_square(self) -> bool:
		if self.width <= 0 or self.height <= 0:
			return False
		return abs(self.width - self.height) <= max(1.0, 0.1 * max(self.width, self.height))


class DomNode(BaseModel):
	"""One candidate node captured during a snapshot pass

	Carries only plain data; the live node is reachable through ``ref`` for the
	duration of the pass that produced it.
	"""
	model_config = ConfigDict(extra='ignore')

	ref: str = Field(description="Reference token stamped on the live node for this pass")
	index: int = Field(description="Document order within the frame")
	tag: str = ''
	element_id: Optional[str] = None
	classes: list[str] = Field(default_factory=list)
	role: Optional[str] = None
	test_id: Optional[str] = None
	aria_label: Optional[str] = None
	title: Optional[str] = None
	text: str = ''

	# State
	disabled: bool = False
	aria_disabled: bool = False
	visibility: str = 'visible'
	display: str = 'block'
	has_handler: bool = False
	box: BoundingBox = Field(default_factory=BoundingBox)
	svg: Optional[SvgSignature] = None

	# Position in the document
	stacking: float = Field(default=0, description="z-index of the enclosing overlay root")
	containers: list[str] = Field(default_factory=list, description="Landmark regions enclosing the node")

	def label_candidates(self) -> list[str]:
		"""Accessible name sources in priority order"""
		return [value for value in (self.aria_label, self.title, self.text) if value]

	def in_container(self, name: str) -> bool:
		return name in self.containers


class FrameSnapshot(BaseModel):
	"""Result of one snapshot pass over a single frame"""
	model_config = ConfigDict(extra='ignore')

	frame_order: int = 0
	url: str = ''
	nodes: list[DomNode] = Field(default_factory=list)


def describe_node(node: Optional[DomNode]) -> Optional[dict[str, Any]]:
	"""Short evidence summary: tag with id and classes, label and leading text"""
	if node is None:
		return None
	tag = node.tag or 'element'
	if node.element_id:
		tag += f'#{node.element_id}'
	if node.classes:
		tag += ''.join(f'.{name}' for name in node.classes)
	if node.test_id:
		tag = f'{tag}[data-testid={node.test_id}]'
	return {
		'tag': tag,
		'role': node.role,
		'label': node.aria_label or node.title or '',
		'text': (node.text or '')[:60],
	}
