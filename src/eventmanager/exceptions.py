"""
Exceptions raised by eventmanager.
"""


class EventCanceled(Exception):
    """
    Raised by `post` when a cancelable listener cancels the dispatch.
    """

    def __init__(self, event: str) -> None:
        super().__init__(f"event {event!r} was canceled")
        self.event = event
