"""
Eventmanager
------------

In-process event registry with priorities, cancelation and chained managers.

Features:

- `listen(event, callback, namespace, priority, cancelable)` and the
  decorator form `@subscribe(event, ...)`.
- `post(event, *args, **kwargs)` is **async**: awaits async listeners and calls sync ones,
  one at a time, lowest priority first. Returns the posted positional arguments.
- Cancelable listeners get a `CancellationToken` as first argument; calling
  `token.cancel()` stops the dispatch and `post` raises `EventCanceled`.
- `post_sync(...)` helper to use from sync code.
- `remove(namespace)` drops every listener registered under a namespace.
- `EventManager(parent)` chains managers: listening on a child also listens on the parent.
- Thread-safe registration and dispatch. No dependencies.
"""

import logging

from .core import (
    clear,
    get_default_manager,
    list_listeners,
    listen,
    post,
    post_sync,
    remove,
    subscribe,
)
from .event_manager import (
    DEFAULT_NAMESPACE,
    DEFAULT_PRIORITY,
    CancellationToken,
    EventManager,
)
from .exceptions import EventCanceled

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "listen",
    "subscribe",
    "post",
    "post_sync",
    "remove",
    "clear",
    "list_listeners",
    "get_default_manager",
    "EventManager",
    "CancellationToken",
    "EventCanceled",
    "DEFAULT_NAMESPACE",
    "DEFAULT_PRIORITY",
]
