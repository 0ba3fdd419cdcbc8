"""Exceptions raised by the hierarchy engine."""


class OntoviewError(Exception):
    """Base class for engine errors."""


class UnknownRootError(OntoviewError, KeyError):
    """Raised when a tree is requested for a root id absent from the graph."""

    def __init__(self, root_id: str):
        super().__init__(root_id)
        self.root_id = root_id

    def __str__(self) -> str:
        return f"Root '{self.root_id}' is not in the graph"


class UnknownNodeError(OntoviewError, KeyError):
    """Raised when a tree node key is not part of the current tree."""

    def __init__(self, key: int):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Tree node {self.key} does not exist"
