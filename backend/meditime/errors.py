class StoreError(RuntimeError):
    """The document store could not be reached or a query failed."""


class EmptyHistoryError(Exception):
    """A history clear was requested but there is nothing stored."""
