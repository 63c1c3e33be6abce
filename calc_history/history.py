"""Operation history for Calc History.

A history is an ordered, append-only log of operation records:
- Records are plain strings ("2 + 2 = 4")
- Insertion order is preserved, nothing is evicted
- The most recent N records can be read back
"""

from abc import ABC, abstractmethod
from typing import Iterator, List


class History(ABC):
    """Sink for operation records written by a calculator."""

    @abstractmethod
    def add_entry(self, operation: str) -> None:
        """Append a record to the end of the history."""

    @abstractmethod
    def get_last_operations(self, count: int) -> List[str]:
        """Return the last ``count`` records, oldest first."""


class InMemoryHistory(History):
    """History kept in an in-process list.

    Lives as long as the object does; nothing is written to disk.
    """

    def __init__(self):
        self._operations: List[str] = []

    def add_entry(self, operation: str) -> None:
        """Append a record. The content is not validated."""
        self._operations.append(operation)

    def get_last_operations(self, count: int) -> List[str]:
        """Return up to ``count`` most recent records in insertion order.

        Args:
            count: Number of records wanted. Larger than the history
                returns everything, zero returns an empty list.

        Returns:
            A new list; mutating it does not affect the history.

        Raises:
            ValueError: If count is negative.
        """
        if count < 0:
            raise ValueError(f"count must be non-negative, got {count}")

        start = len(self._operations) - min(count, len(self._operations))
        return self._operations[start:]

    @property
    def size(self) -> int:
        """Return number of stored records."""
        return len(self._operations)

    def __len__(self) -> int:
        return len(self._operations)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._operations))
