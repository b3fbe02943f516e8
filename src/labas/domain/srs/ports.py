"""
Ports (interfaces) for vocabulary persistence.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from .models import ReviewableItem


class VocabularyRepository(ABC):
    """
    Port for reading and writing ReviewableItem records.

    Implementations:
        - JsonVocabularyStore: A single JSON file on disk.
    """

    @abstractmethod
    def list_items(self) -> list[ReviewableItem]:
        """Return every stored item, in insertion order."""

    @abstractmethod
    def get(self, item_id: str) -> ReviewableItem:
        """
        Fetch one item.

        Raises:
            ItemNotFound: If no item has this id.
        """

    @abstractmethod
    def add(
        self, text: str, translation: str | None = None, now: datetime | None = None
    ) -> ReviewableItem:
        """Create a new item at level 1, due immediately."""

    @abstractmethod
    def update(self, item: ReviewableItem) -> None:
        """Persist the scheduling state of an existing item."""

    @abstractmethod
    def remove(self, item_id: str) -> None:
        """Delete an item."""
