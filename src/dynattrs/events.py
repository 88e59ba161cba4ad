"""
dynattrs.events  ──  Save lifecycle hooks for DynamicRecord classes
"""

from __future__ import annotations
from typing import Callable, Type, List, Dict, Any, TYPE_CHECKING
from collections import defaultdict

if TYPE_CHECKING:
    from .core.record import DynamicRecord

BEFORE_SAVE = "before_save"
AFTER_SAVE = "after_save"


class EventRegistry:
    """Central registry for save handlers"""

    def __init__(self):
        # Maps event type -> record class -> handlers in registration order
        self._handlers: Dict[str, Dict[type, List[Callable]]] = {
            BEFORE_SAVE: defaultdict(list),
            AFTER_SAVE: defaultdict(list),
        }

    def register(
        self,
        event_type: str,
        record_classes: tuple[Type[DynamicRecord], ...],
        handler: Callable,
    ) -> None:
        """Register a handler for specific record classes"""
        for cls in record_classes:
            handlers = self._handlers[event_type][cls]
            if handler not in handlers:
                handlers.append(handler)

    def handlers_for(self, event_type: str, instance: Any) -> List[Callable]:
        """Handlers for the instance's class and its parents, most specific first"""
        handlers: List[Callable] = []
        for cls in type(instance).__mro__:
            for handler in self._handlers[event_type].get(cls, ()):
                if handler not in handlers:
                    handlers.append(handler)
        return handlers

    def emit(self, event_type: str, instance: Any) -> bool:
        """
        Run matching handlers in order. A handler returning exactly ``False``
        halts the chain and the emit reports failure.
        """
        for handler in self.handlers_for(event_type, instance):
            if handler(instance) is False:
                return False
        return True


# Global registry instance
_registry = EventRegistry()


class OnDecorator:
    """Namespace for event decorators"""

    @staticmethod
    def before_save(*record_classes: Type[DynamicRecord]) -> Callable:
        """Decorator for handlers that run after validation, before the write"""

        def decorator(func: Callable) -> Callable:
            _registry.register(BEFORE_SAVE, record_classes, func)
            return func

        return decorator

    @staticmethod
    def after_save(*record_classes: Type[DynamicRecord]) -> Callable:
        """Decorator for handlers that run once the write is committed"""

        def decorator(func: Callable) -> Callable:
            _registry.register(AFTER_SAVE, record_classes, func)
            return func

        return decorator


# Export the decorator interface
on = OnDecorator()


def run_before_save(instance: DynamicRecord) -> bool:
    """Return ``False`` if any handler vetoed the save"""
    return _registry.emit(BEFORE_SAVE, instance)


def run_after_save(instance: DynamicRecord) -> None:
    _registry.emit(AFTER_SAVE, instance)
