"""
eventmanager.core
-----------------

Module-level default manager and function wrappers around it.
"""

from typing import Any, Callable, List

from .event_manager import (
    DEFAULT_NAMESPACE,
    DEFAULT_PRIORITY,
    EventManager,
    ListenerFunc,
)

# -------------------- module-level default manager --------------------

_default_manager = EventManager()


def get_default_manager() -> EventManager:
    """Return the process-wide manager used by the module-level functions."""
    return _default_manager


# Registration
def listen(
    event: str,
    callback: ListenerFunc,
    namespace: str = DEFAULT_NAMESPACE,
    priority: int = DEFAULT_PRIORITY,
    cancelable: bool = False,
) -> None:
    """
    Register a callback for an event on the default manager.
    Lower priority values run first; on ties cancelable listeners run first,
    then registration order is preserved.

    Args:
        event (str): The event to register the callback for.
        callback (ListenerFunc): The callback to register.
        namespace (str, optional): Tag used by `remove()`. Defaults to DEFAULT_NAMESPACE.
        priority (int, optional): Dispatch priority. Defaults to 100.
        cancelable (bool, optional): Whether the callback receives a CancellationToken
                                     as first argument. Defaults to False.
    """
    _default_manager.listen(event, callback, namespace, priority, cancelable)


def remove(namespace: str) -> int:
    """
    Unregister every listener tagged with `namespace`.
    Returns the number of removed listeners.
    """
    return _default_manager.remove(namespace)


def clear() -> None:
    """Remove all listeners from the default manager."""
    _default_manager.clear()


def list_listeners(event: str) -> List[ListenerFunc]:
    """
    Return the callbacks registered for `event`, in dispatch order.

    Args:
        event (str): The event to list listeners for.

    Returns:
        List[ListenerFunc]: The callbacks registered for `event`.
    """
    return _default_manager.list_listeners(event)


# Decorator
def subscribe(
    event: str,
    namespace: str = DEFAULT_NAMESPACE,
    priority: int = DEFAULT_PRIORITY,
    cancelable: bool = False,
) -> Callable[[ListenerFunc], ListenerFunc]:
    """
    Decorator to register a function as a listener for `event` on the default manager.

    Example:
    @subscribe("save", namespace="audit", priority=10, cancelable=True)
    def check_save(token, doc):
        if doc.locked:
            token.cancel()
    """
    return _default_manager.subscribe(event, namespace, priority, cancelable)


# Dispatch
async def post(event: str, *args: Any, **kwargs: Any) -> List[Any]:
    """
    Dispatch `event` on the default manager.
    Returns the positional arguments unchanged; raises EventCanceled if a
    cancelable listener cancels the dispatch.

    Example:
    await post("save", doc)
    """
    return await _default_manager.post(event, *args, **kwargs)


def post_sync(event: str, *args: Any, **kwargs: Any):
    """
    Convenience to use post(...) from sync code.

    - If no loop is running, it blocks until done and returns the result.
    - If a loop is running, schedules and returns an asyncio.Task.
    """
    return _default_manager.post_sync(event, *args, **kwargs)
