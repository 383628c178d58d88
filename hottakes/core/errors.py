from typing import Optional


class HotTakesError(Exception):
    """Base class for errors raised by the ranking engine."""


class RemoteStoreError(HotTakesError):
    """The remote board store could not be read or written.

    The underlying transport error is kept as ``__cause__``.
    """

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code
