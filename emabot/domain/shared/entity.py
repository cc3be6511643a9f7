"""Identity-based domain objects."""

from abc import ABC


class Entity(ABC):
    """Domain object compared by its store-assigned ID.

    Until the store assigns an ID, an entity is only equal to itself.
    """

    def __init__(self, id: int | None = None) -> None:
        self._id = id

    @property
    def id(self) -> int | None:
        return self._id

    def assign_id(self, id: int) -> None:
        """Record the ID generated by the store.

        Raises:
            ValueError: If a different ID was already assigned.
        """
        if self._id is not None and self._id != id:
            raise ValueError(f"{type(self).__name__} already has id={self._id}")
        self._id = id

    def __eq__(self, other: object) -> bool:
        if type(self) is not type(other):
            return False
        if self._id is None:
            return self is other
        return self._id == other._id

    def __hash__(self) -> int:
        return hash((type(self).__name__, self._id)) if self._id is not None else id(self)
