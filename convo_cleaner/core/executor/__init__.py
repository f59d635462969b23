from .service import EVENT_INIT, HOVER_EVENTS, PRESS_EVENTS, ActionExecutor
from .views import ActionResult, ActionType

__all__ = ['ActionExecutor', 'ActionResult', 'ActionType', 'EVENT_INIT', 'HOVER_EVENTS', 'PRESS_EVENTS']
