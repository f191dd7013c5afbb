"""
Business logic that operates on a single record.
"""


class ServiceBase[T]:
    """Wrap a record with domain specific operations."""

    model: type[T]

    def __init__(self, obj: T):
        self.obj = obj

    def __repr__(self):
        return f"<{self.__class__.__name__} {self.obj}>"
