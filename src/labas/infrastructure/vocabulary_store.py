"""
JSON Vocabulary Store — Infrastructure adapter for a vocabulary file on disk.

Implements VocabularyRepository over a single JSON document.
"""

import json
import logging
from datetime import datetime
from pathlib import Path

from ulid import ULID

from labas.application.srs.scheduler import utcnow
from labas.domain.constants import MIN_LEVEL
from labas.domain.errors import ItemNotFound
from labas.domain.srs.models import ReviewableItem
from labas.domain.srs.ports import VocabularyRepository

logger = logging.getLogger(__name__)


def generate_item_id() -> str:
    """Generate a stable item ID using ULID."""
    return f"word_{ULID()}"


def _to_record(item: ReviewableItem) -> dict:
    return {
        "id": item.id,
        "text": item.text,
        "translation": item.translation,
        "level": item.level,
        "next_review_at": item.next_review_at.isoformat(),
        "total_reviews": item.total_reviews,
        "correct_answers": item.correct_answers,
        "last_reviewed_at": item.last_reviewed_at.isoformat() if item.last_reviewed_at else None,
    }


def _from_record(record: dict) -> ReviewableItem:
    last = record.get("last_reviewed_at")
    return ReviewableItem(
        id=record["id"],
        text=record.get("text", ""),
        translation=record.get("translation"),
        level=record.get("level", MIN_LEVEL),
        next_review_at=datetime.fromisoformat(record["next_review_at"]),
        total_reviews=record.get("total_reviews", 0),
        correct_answers=record.get("correct_answers", 0),
        last_reviewed_at=datetime.fromisoformat(last) if last else None,
    )


class JsonVocabularyStore(VocabularyRepository):
    """
    Stores ReviewableItem records in one JSON file.

    Every mutation rewrites the whole file; vocabularies are small.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    def list_items(self) -> list[ReviewableItem]:
        if not self.path.exists():
            return []
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        return [_from_record(record) for record in raw.get("items", [])]

    def get(self, item_id: str) -> ReviewableItem:
        for item in self.list_items():
            if item.id == item_id:
                return item
        raise ItemNotFound(item_id)

    def add(
        self, text: str, translation: str | None = None, now: datetime | None = None
    ) -> ReviewableItem:
        item = ReviewableItem(
            id=generate_item_id(),
            text=text,
            translation=translation,
            next_review_at=now or utcnow(),
        )
        items = self.list_items()
        items.append(item)
        self._write(items)
        logger.info(f"Added {text!r} as {item.id}")
        return item

    def update(self, item: ReviewableItem) -> None:
        items = self.list_items()
        for i, existing in enumerate(items):
            if existing.id == item.id:
                items[i] = item
                self._write(items)
                return
        raise ItemNotFound(item.id)

    def remove(self, item_id: str) -> None:
        items = self.list_items()
        kept = [item for item in items if item.id != item_id]
        if len(kept) == len(items):
            raise ItemNotFound(item_id)
        self._write(kept)

    def _write(self, items: list[ReviewableItem]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        data = {"items": [_to_record(item) for item in items]}
        self.path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
