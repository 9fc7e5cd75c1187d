"""
Listener registration and synchronous firing for LineSuffixReader events.
"""

from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional

EventListener = Callable[..., None]


class EventSource:
    """Base class providing event listener management and firing capabilities

    Listeners run synchronously on the thread that fires the event; an exception raised by a
    listener propagates to the caller of ``fire``.
    """

    def __init__(self) -> None:
        self._listeners: Dict[str, List[EventListener]] = defaultdict(list)
        self._catch_all_listeners: List[EventListener] = []

    def add_listener(self, event: str, listener: EventListener) -> None:
        """Add a listener for a specific event

        Args:
            event: The event name to listen for
            listener: The callable to invoke with the event payload when the event fires
        """
        if listener not in self._listeners[event]:
            self._listeners[event].append(listener)

    def remove_listener(self, listener: EventListener, event: Optional[str] = None) -> None:
        """Remove a listener from one event, or from every event when `event` is None

        Args:
            listener: The listener callable to remove
            event: Restrict removal to this event name (default: None)
        """
        events = [event] if event is not None else list(self._listeners)
        for name in events:
            if listener in self._listeners.get(name, ()):
                self._listeners[name].remove(listener)

        if event is None and listener in self._catch_all_listeners:
            self._catch_all_listeners.remove(listener)

    def add_catch_all_listener(self, listener: EventListener) -> None:
        """Add a listener that receives ALL events

        Args:
            listener: The callable to invoke for all events.
                     Must accept (event_name, *args) signature
        """
        if listener not in self._catch_all_listeners:
            self._catch_all_listeners.append(listener)

    def remove_catch_all_listener(self, listener: EventListener) -> None:
        if listener in self._catch_all_listeners:
            self._catch_all_listeners.remove(listener)

    def auto_listen(self, observer: Any, prefix: str = "_on_") -> None:
        """Attach every method of `observer` named ``<prefix><event>`` as a listener for ``<event>``

        For example, with the default prefix a method named ``_on_drained`` listens for the
        ``drained`` event.

        Args:
            observer: Object containing listener methods
            prefix: Method name prefix to search for (default: "_on_")
        """
        for attr_name in dir(observer):
            if attr_name.startswith(prefix):
                attr = getattr(observer, attr_name)
                if callable(attr):
                    self.add_listener(attr_name[len(prefix) :], attr)

    def has_listeners(self, event: str) -> bool:
        """Return True when firing `event` would reach at least one listener"""
        return bool(self._catch_all_listeners) or bool(self._listeners.get(event))

    def fire(self, event: str, *args: Any) -> None:
        """Fire an event to all registered listeners

        Args:
            event: The event name to fire
            *args: Payload passed to the listeners
        """
        for listener in list(self._listeners.get(event, ())):
            listener(*args)

        # catch-all listeners get the event name first
        for listener in list(self._catch_all_listeners):
            listener(event, *args)

    def clear_listeners(self, event: Optional[str] = None) -> None:
        """Clear listeners for a specific event or all events

        Args:
            event: Event name to clear listeners for. If None, clears all listeners.
        """
        if event is None:
            self._listeners.clear()
            self._catch_all_listeners.clear()
        else:
            self._listeners.pop(event, None)
