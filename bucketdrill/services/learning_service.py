"""Learning Service - Practice session wrapper around BucketEngine."""
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from bucketdrill.flashcards.engine import BucketEngine
from bucketdrill.flashcards.models import AnswerDifficulty, Flashcard

logger = logging.getLogger(__name__)


@dataclass
class LearningStats:
    """Learning statistics."""
    total_cards: int = 0
    due_today: int = 0
    mastered: int = 0  # Cards at or above the mastery bucket
    mastery_percentage: float = 0.0
    reviews: int = 0
    retention_rate: float = 0.0

    def to_summary(self) -> str:
        """Describe the deck in a line: today's queue, then mastery, then answers."""
        if not self.total_cards:
            return "The deck is empty."

        lines = [f"{self.due_today} of {self.total_cards} cards up for practice today"]
        if self.mastered:
            lines.append(
                f"{self.mastered} in the mastered buckets ({self.mastery_percentage:g}%)"
            )
        if self.reviews:
            lines.append(
                f"{self.retention_rate:g}% of {self.reviews} answers were hard or easy"
            )
        return "; ".join(lines) + "."

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_cards": self.total_cards,
            "due_today": self.due_today,
            "mastered": self.mastered,
            "mastery_percentage": self.mastery_percentage,
            "reviews": self.reviews,
            "retention_rate": self.retention_rate
        }


class LearningService:
    """Day-by-day practice sessions on top of BucketEngine.

    Provides:
    - A current day and the queue of cards due on it
    - One current card at a time, rated with an AnswerDifficulty
    - Session statistics and overall progress

    Not thread-safe; callers share one instance from a single task.
    """

    def __init__(self, engine: Optional[BucketEngine] = None):
        self._engine = engine
        self._day: int = 0
        self._queue: List[Flashcard] = []
        self._current_card: Optional[Flashcard] = None
        self._session_reviewed: int = 0
        self._session_correct: int = 0

    def _get_engine(self) -> BucketEngine:
        """Lazy load BucketEngine."""
        if self._engine is None:
            self._engine = BucketEngine()
        return self._engine

    @property
    def day(self) -> int:
        return self._day

    def start_day(self, day: int, tags: Optional[List[str]] = None) -> List[Flashcard]:
        """Begin practicing a day and queue up the cards due on it.

        Args:
            day: Day number
            tags: Optional tag filter

        Returns:
            Cards queued for the day
        """
        self._day = day
        self._current_card = None
        self._queue = self._get_engine().get_due_cards(day, tags=tags)
        logger.info(f"Day {day}: {len(self._queue)} cards due")
        return list(self._queue)

    def get_next_card(self) -> Optional[Flashcard]:
        """Get the next queued card for the current day.

        Returns:
            Next due flashcard or None when the day is done
        """
        if self._current_card is not None:
            return self._current_card
        if self._queue:
            self._current_card = self._queue.pop(0)
            return self._current_card
        return None

    def show_hint(self) -> str:
        """Hint for the current card."""
        if not self._current_card:
            return "No current card"
        return self._get_engine().get_hint(self._current_card)

    def rate_current_card(self, difficulty: Any) -> Dict[str, Any]:
        """Rate the current card.

        Args:
            difficulty: AnswerDifficulty or its name

        Returns:
            Review result with a short message
        """
        if not self._current_card:
            return {"error": "No current card to rate"}

        result = self._get_engine().review_card(self._current_card, difficulty, day=self._day)
        if "error" in result:
            return result

        self._session_reviewed += 1
        if result["correct"]:
            self._session_correct += 1
        self._current_card = None

        outcome = AnswerDifficulty(result["difficulty"])
        if outcome is AnswerDifficulty.EASY:
            result["message"] = f"Got it! Moved up to bucket {result['new_bucket']}."
        elif outcome is AnswerDifficulty.HARD:
            result["message"] = f"Close. Staying in bucket {result['new_bucket']}."
        else:
            result["message"] = "No problem, back to bucket 0 for more practice."

        return result

    def get_stats(self) -> LearningStats:
        """Get learning statistics for the current day."""
        engine = self._get_engine()
        stats = engine.get_stats()

        return LearningStats(
            total_cards=stats.get("total_cards", 0),
            due_today=len(engine.get_due_cards(self._day)),
            mastered=stats.get("mastered", 0),
            mastery_percentage=stats.get("mastery_percentage", 0.0),
            reviews=stats.get("reviews", 0),
            retention_rate=stats.get("retention_rate", 0.0)
        )

    def get_current_card(self) -> Optional[Flashcard]:
        return self._current_card

    def get_session_stats(self) -> Dict[str, Any]:
        """Get current session statistics.

        Returns:
            Dict with reviewed count, correct count, accuracy, remaining
        """
        accuracy = 0.0
        if self._session_reviewed > 0:
            accuracy = (self._session_correct / self._session_reviewed) * 100

        return {
            "day": self._day,
            "reviewed": self._session_reviewed,
            "correct": self._session_correct,
            "accuracy": accuracy,
            "remaining": len(self._queue) + (1 if self._current_card else 0)
        }

    def reset_session(self) -> Dict[str, Any]:
        """Abandon the rest of the day's queue and clear the tallies.

        Cards already rated keep their new buckets; the day number is kept.

        Returns:
            Session statistics as they stood before the reset
        """
        finished = self.get_session_stats()
        if finished["remaining"]:
            logger.info(f"Day {self._day}: dropped {finished['remaining']} unpractised cards")
        self._queue, self._current_card = [], None
        self._session_reviewed = self._session_correct = 0
        return finished


# Shared instance for callers that do not manage their own engine
_learning_service: Optional[LearningService] = None


def get_learning_service(engine: Optional[BucketEngine] = None) -> LearningService:
    """Return the shared LearningService, binding it to engine on first use.

    Raises:
        ValueError: if a different engine is passed after the service exists
    """
    global _learning_service
    if _learning_service is None:
        _learning_service = LearningService(engine)
    elif engine is not None and engine is not _learning_service._get_engine():
        raise ValueError("Shared learning service is already bound to another engine")
    return _learning_service
