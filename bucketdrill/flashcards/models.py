"""
Flashcard Data Models

Defines the value types shared by the bucket scheduler, the engine and the
learning service.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterable, Optional, Set

# Buckets at or above this index count as mastered
MASTERY_THRESHOLD = 3


class AnswerDifficulty(Enum):
    """How the learner did on a practice trial."""
    WRONG = "wrong"   # Back to bucket 0
    HARD = "hard"     # Stay in the same bucket
    EASY = "easy"     # Promote one bucket

    @classmethod
    def parse(cls, value: Any) -> "AnswerDifficulty":
        """Accept a member, its value or its name (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for member in cls:
                if key in (member.value, member.name.lower()):
                    return member
        raise ValueError(f"Unknown answer difficulty: {value!r}")


def _as_tag_set(tags: Any) -> FrozenSet[str]:
    """A bare string is a single tag, not a sequence of letters."""
    if isinstance(tags, str):
        return frozenset({tags}) if tags else frozenset()
    return frozenset(tags or ())


@dataclass(frozen=True)
class Flashcard:
    """An immutable flashcard, equal to any card built from the same fields."""
    front: str
    back: str
    hint: str = ""
    tags: FrozenSet[str] = field(default_factory=frozenset)

    def __post_init__(self):
        # Accept one tag or any iterable of tags, stored unordered and hashable
        if not isinstance(self.tags, frozenset):
            object.__setattr__(self, "tags", _as_tag_set(self.tags))

    def has_any_tag(self, tags: Iterable[str]) -> bool:
        return not self.tags.isdisjoint(_as_tag_set(tags))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "front": self.front,
            "back": self.back,
            "hint": self.hint,
            "tags": sorted(self.tags),
        }


# Sparse mapping from bucket index to the cards currently at that level
BucketMap = Dict[int, Set[Flashcard]]


@dataclass(frozen=True)
class BucketRange:
    """Lowest and highest bucket that hold at least one card."""
    min_bucket: int
    max_bucket: int


@dataclass(frozen=True)
class PracticeRecord:
    """The difficulty reported the last time a card was practiced."""
    card: Flashcard
    difficulty: AnswerDifficulty
    day: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "card": self.card.to_dict(),
            "difficulty": self.difficulty.value,
            "day": self.day,
        }


@dataclass(frozen=True)
class Progress:
    """Mastery summary across a whole bucket map."""
    total_cards: int = 0
    mastered_cards: int = 0
    mastery_percentage: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cards": self.total_cards,
            "mastered_cards": self.mastered_cards,
            "mastery_percentage": self.mastery_percentage,
        }
