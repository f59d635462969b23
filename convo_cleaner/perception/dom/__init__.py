from .service import REF_ATTRIBUTE, SNAPSHOT_SCRIPT, DomSnapshotter, frame_tree

__all__ = ['REF_ATTRIBUTE', 'SNAPSHOT_SCRIPT', 'DomSnapshotter', 'frame_tree']
