"""Read-only views of the rendered document"""

from .base import BoundingBox, DomNode, FrameSnapshot, SvgSignature, describe_node

__all__ = ['BoundingBox', 'DomNode', 'FrameSnapshot', 'SvgSignature', 'describe_node']
