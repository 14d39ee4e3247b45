"""
Event manager implementation.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .exceptions import EventCanceled

logger = logging.getLogger(__name__)

ListenerFunc = Callable[..., Any]
MaybeAwaitable = Any  # result of listener call; may be awaitable

DEFAULT_NAMESPACE = "gugle-event"
DEFAULT_PRIORITY = 100


class CancellationToken:
    """
    Handed to cancelable listeners as their first argument during a single `post`.
    Once canceled it stays canceled.
    """

    __slots__ = ("_event", "_canceled")

    def __init__(self, event: str) -> None:
        self._event = event
        self._canceled = False

    @property
    def event(self) -> str:
        """Name of the event being dispatched."""
        return self._event

    @property
    def canceled(self) -> bool:
        return self._canceled

    def cancel(self) -> None:
        """Stop the dispatch after the current listener returns."""
        self._canceled = True

    def __repr__(self) -> str:
        return f"CancellationToken(event={self._event!r}, canceled={self._canceled})"


@dataclass(frozen=True, order=True)
class _Listener:
    # Sorting fields (priority ascending, cancelable first, then order ascending)
    sort_index: Tuple[int, bool, int] = field(init=False, repr=False)
    priority: int
    cancelable: bool
    order: int
    namespace: str = field(compare=False)
    func: ListenerFunc = field(compare=False)

    def __post_init__(self) -> None:
        # `not cancelable` sorts True (cancelable) ahead of False on equal priority
        object.__setattr__(
            self, "sort_index", (self.priority, not self.cancelable, self.order)
        )

    def call(
        self, token: CancellationToken, *args: Any, **kwargs: Any
    ) -> MaybeAwaitable:
        """
        Call the listener, prepending the token when it is cancelable.
        """
        if self.cancelable:
            return self.func(token, *args, **kwargs)
        return self.func(*args, **kwargs)


class EventManager:
    """
    A listener registry with priority-ordered, cancelable dispatch.

    Managers can be chained: listening on a manager also listens on its parent
    (and so on up the chain). Removal by namespace only affects the manager it
    is called on.
    """

    def __init__(self, parent: Optional[EventManager] = None) -> None:
        """
        Initialize a new EventManager instance.

        Args:
            parent (EventManager, optional): Manager that receives a copy of every
                                             registration made on this one.
        """
        self._parent = parent
        self._lock = threading.RLock()
        self._listeners: Dict[str, List[_Listener]] = {}
        self._counter = 0  # registration order

    @property
    def parent(self) -> Optional[EventManager]:
        return self._parent

    # -------------------- registration API --------------------
    def listen(
        self,
        event: str,
        callback: ListenerFunc,
        namespace: str = DEFAULT_NAMESPACE,
        priority: int = DEFAULT_PRIORITY,
        cancelable: bool = False,
    ) -> None:
        """
        Register a callback for an event.
        Lower priority values run first. For equal priority, cancelable listeners
        run before non-cancelable ones, then registration order is preserved.

        Args:
            event (str): The event to register the callback for.
            callback (ListenerFunc): The callback to register.
            namespace (str, optional): Tag used by `remove()` for bulk removal.
                                       Defaults to DEFAULT_NAMESPACE.
            priority (int, optional): Dispatch priority. Defaults to 100.
            cancelable (bool, optional): Whether the callback receives a
                                         CancellationToken as first argument.
                                         Defaults to False.

        Returns:
            None
        """
        if not callable(callback):
            raise TypeError("callback must be callable")

        with self._lock:
            self._counter += 1
            listener = _Listener(
                priority=priority,
                cancelable=cancelable,
                order=self._counter,
                namespace=namespace,
                func=callback,
            )
            bucket = self._listeners.setdefault(event, [])
            bucket.append(listener)
            bucket.sort()

        logger.debug(
            "Registered listener %r on %r (namespace=%r, priority=%d, cancelable=%s)",
            callback,
            event,
            namespace,
            priority,
            cancelable,
        )

        if self._parent is not None:
            self._parent.listen(event, callback, namespace, priority, cancelable)

    def subscribe(
        self,
        event: str,
        namespace: str = DEFAULT_NAMESPACE,
        priority: int = DEFAULT_PRIORITY,
        cancelable: bool = False,
    ) -> Callable[[ListenerFunc], ListenerFunc]:
        """
        Decorator to register a function as a listener for `event`.

        Args:
            event (str): The event to register the listener for.
            namespace (str, optional): Tag used by `remove()`. Defaults to DEFAULT_NAMESPACE.
            priority (int, optional): Dispatch priority. Defaults to 100.
            cancelable (bool, optional): Whether the listener receives a
                                         CancellationToken. Defaults to False.

        Returns:
            Callable[[ListenerFunc], ListenerFunc]: The decorator function.
        """

        def wrapper(func: ListenerFunc) -> ListenerFunc:
            self.listen(event, func, namespace, priority, cancelable)
            return func

        return wrapper

    def remove(self, namespace: str) -> int:
        """
        Unregister every listener tagged with `namespace`.
        Does not touch the parent manager.

        Args:
            namespace (str): The namespace to remove.

        Returns:
            int: The number of removed listeners.
        """
        removed = 0
        with self._lock:
            for event in list(self._listeners):
                lst = self._listeners[event]
                kept = [h for h in lst if h.namespace != namespace]
                removed += len(lst) - len(kept)
                if kept:
                    self._listeners[event] = kept
                else:
                    del self._listeners[event]

        logger.debug("Removed %d listener(s) in namespace %r", removed, namespace)
        return removed

    def clear(self) -> None:
        """Remove all listeners from this manager."""
        with self._lock:
            self._listeners.clear()

    def list_listeners(self, event: str) -> List[ListenerFunc]:
        """Return the callbacks registered for `event`, in dispatch order."""
        with self._lock:
            return [h.func for h in self._listeners.get(event, [])]

    def has_listeners(self, event: str) -> bool:
        with self._lock:
            return event in self._listeners

    # -------------------- dispatch --------------------
    async def post(self, event: str, *args: Any, **kwargs: Any) -> List[Any]:
        """
        Dispatch `event` to all registered listeners in priority order.
        Awaits async listeners; calls sync listeners directly.
        Exceptions raised by listeners will propagate.

        Args:
            event (str): The event to dispatch.
            *args: Positional arguments to pass to the listeners.
            **kwargs: Keyword arguments to pass to the listeners.

        Returns:
            List[Any]: The positional arguments, unchanged.

        Raises:
            EventCanceled: A cancelable listener canceled the dispatch.
        """
        # snapshot listeners to avoid holding the lock during callbacks
        with self._lock:
            listeners = list(self._listeners.get(event, []))

        if not listeners:
            return list(args)

        token = CancellationToken(event)
        for h in listeners:
            result = h.call(token, *args, **kwargs)
            if inspect.isawaitable(result):
                await result

            if h.cancelable and token.canceled:
                logger.debug("Dispatch of %r canceled by %r", event, h.func)
                raise EventCanceled(event)

        return list(args)

    def post_sync(self, event: str, *args: Any, **kwargs: Any):
        """
        Convenience to use post(...) from sync code.

        - If no loop is running, it blocks until done and returns the result.
        - If a loop is running, schedules and returns an asyncio.Task.

        Args:
            event (str): The event to dispatch.
            *args: Positional arguments to pass to the listeners.
            **kwargs: Keyword arguments to pass to the listeners.

        Returns:
            The posted arguments if no loop is running, otherwise an asyncio.Task
        """
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return asyncio.run(self.post(event, *args, **kwargs))
        else:
            return loop.create_task(self.post(event, *args, **kwargs))
