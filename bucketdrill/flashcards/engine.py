"""
BucketEngine - In-memory Leitner scheduling for a card collection.

Cards start in bucket 0 and move between buckets as they are reviewed:
  wrong - back to bucket 0
  hard  - same bucket
  easy  - one bucket up

Buckets at or above the mastery threshold (default 3) count as mastered.
State lives for the lifetime of the engine only.
"""

import os
import logging
from typing import Any, Dict, Iterable, List, Optional

from dotenv import load_dotenv

from .models import (
    MASTERY_THRESHOLD,
    AnswerDifficulty,
    BucketMap,
    Flashcard,
    PracticeRecord,
    Progress,
)
from .scheduler import (
    DuePolicy,
    compute_progress,
    find_bucket,
    get_active_bucket_range,
    is_due_exponential,
    is_due_on_day,
    place_card,
    record_outcome,
    render_hint,
    select_due_cards,
    to_ordered_buckets,
)

load_dotenv()

logger = logging.getLogger(__name__)

DUE_POLICIES: Dict[str, DuePolicy] = {
    "fixed": is_due_on_day,
    "exponential": is_due_exponential,
}


def resolve_due_policy(name: str) -> DuePolicy:
    """Look up a due policy by name ('fixed' or 'exponential')."""
    try:
        return DUE_POLICIES[name.strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown due policy {name!r}, expected one of {sorted(DUE_POLICIES)}"
        ) from None


class BucketEngine:
    """
    Flashcard collection scheduled with buckets.

    Features:
    - Create cards or load a prepared card set
    - Day-based due selection with a swappable policy
    - Practice history for retention statistics
    - Tag-based filtering
    """

    def __init__(
        self,
        cards: Iterable[Flashcard] = (),
        mastery_threshold: int = None,
        due_policy: str = None
    ):
        """Initialize the engine, reading defaults from the environment."""
        if mastery_threshold is None:
            mastery_threshold = int(os.getenv("BUCKET_MASTERY_THRESHOLD", str(MASTERY_THRESHOLD)))
        if due_policy is None:
            due_policy = os.getenv("BUCKET_DUE_POLICY", "fixed")

        self.mastery_threshold = mastery_threshold
        self.due_policy = resolve_due_policy(due_policy)
        self.buckets: BucketMap = {0: set()}
        self.history: List[PracticeRecord] = []
        self.add_cards(cards)

    def create_card(
        self,
        front: str,
        back: str,
        hint: str = "",
        tags: List[str] = None
    ) -> Flashcard:
        """
        Create a flashcard and put it in bucket 0.

        A card that is already scheduled keeps its current bucket.

        Args:
            front: Prompt text
            back: Answer text
            hint: Optional hint, empty for none
            tags: Category labels for filtering

        Returns:
            The new card
        """
        card = Flashcard(front=front, back=back, hint=hint, tags=tags or ())
        if find_bucket(self.buckets, card) is None:
            place_card(self.buckets, card, 0)
            logger.info(f"Created flashcard: {front[:50]}")
        return card

    def add_cards(self, cards: Iterable[Flashcard]) -> int:
        """Add prepared cards to bucket 0, skipping ones already scheduled."""
        added = 0
        for card in cards:
            if find_bucket(self.buckets, card) is None:
                place_card(self.buckets, card, 0)
                added += 1
        if added:
            logger.info(f"Added {added} flashcards")
        return added

    def get_bucket(self, card: Flashcard) -> Optional[int]:
        """Bucket currently holding the card, or None if it is not scheduled."""
        return find_bucket(self.buckets, card)

    def get_all_cards(self) -> List[Flashcard]:
        """All scheduled cards ordered by bucket, then front."""
        return [
            card
            for bucket in sorted(self.buckets)
            for card in sorted(self.buckets[bucket], key=lambda c: (c.front, c.back))
        ]

    def get_due_cards(
        self,
        day: int,
        tags: List[str] = None,
        limit: int = None
    ) -> List[Flashcard]:
        """
        Get cards due for practice on a given day.

        Args:
            day: Day number
            tags: Filter by tags (OR matching)
            limit: Maximum cards to return

        Returns:
            Due cards sorted by front
        """
        due = select_due_cards(to_ordered_buckets(self.buckets), day, self.due_policy)
        if tags:
            due = {card for card in due if card.has_any_tag(tags)}

        cards = sorted(due, key=lambda c: (c.front, c.back))
        if limit is not None:
            cards = cards[:limit]
        return cards

    def review_card(self, card: Flashcard, difficulty: Any, day: int = None) -> Dict:
        """
        Record a practice result and move the card.

        Args:
            card: Card that was practiced
            difficulty: AnswerDifficulty or its name ('wrong', 'hard', 'easy')
            day: Day of practice, kept in the history

        Returns:
            Previous and new bucket, or an error entry
        """
        if card is None:
            return {"error": "Card not found"}

        try:
            difficulty = AnswerDifficulty.parse(difficulty)
        except ValueError as e:
            logger.warning(f"Rejected review for {card.front[:50]}: {e}")
            return {"error": str(e)}

        previous = find_bucket(self.buckets, card)
        record_outcome(self.buckets, card, difficulty)
        new_bucket = find_bucket(self.buckets, card)

        self.history.append(PracticeRecord(card=card, difficulty=difficulty, day=day))

        return {
            "front": card.front,
            "difficulty": difficulty.value,
            "correct": difficulty is not AnswerDifficulty.WRONG,
            "previous_bucket": previous if previous is not None else 0,
            "new_bucket": new_bucket,
            "mastered": new_bucket >= self.mastery_threshold,
        }

    def sync_reviews(self, reviews: List[Dict]) -> Dict:
        """
        Apply a batch of reviews.

        Args:
            reviews: List of {card, difficulty, day}

        Returns:
            Sync results
        """
        results = []
        for review in reviews:
            result = self.review_card(
                review.get("card"),
                review.get("difficulty"),
                review.get("day")
            )
            results.append(result)

        return {
            "synced": len(results),
            "results": results
        }

    def delete_card(self, card: Flashcard) -> Dict:
        """Remove a card from every bucket and drop its history."""
        bucket = find_bucket(self.buckets, card)
        if bucket is None:
            return {"error": "Card not found"}

        for cards in self.buckets.values():
            cards.discard(card)
        self.history = [record for record in self.history if record.card != card]
        logger.info(f"Deleted flashcard: {card.front[:50]}")

        return {"deleted": True, "front": card.front, "bucket": bucket}

    def get_hint(self, card: Flashcard) -> str:
        return render_hint(card)

    def get_progress(self) -> Progress:
        return compute_progress(self.buckets, self.history, self.mastery_threshold)

    def get_stats(self) -> Dict:
        """Get collection statistics."""
        progress = self.get_progress()
        bucket_range = get_active_bucket_range(to_ordered_buckets(self.buckets))

        correct = sum(1 for r in self.history if r.difficulty is not AnswerDifficulty.WRONG)
        retention_rate = 0.0
        if self.history:
            retention_rate = round(correct / len(self.history) * 100, 1)

        return {
            "total_cards": progress.total_cards,
            "mastered": progress.mastered_cards,
            "mastery_percentage": progress.mastery_percentage,
            "bucket_counts": {
                bucket: len(cards) for bucket, cards in sorted(self.buckets.items()) if cards
            },
            "min_bucket": bucket_range.min_bucket if bucket_range else None,
            "max_bucket": bucket_range.max_bucket if bucket_range else None,
            "reviews": len(self.history),
            "retention_rate": retention_rate
        }

    def get_review_forecast(self, start_day: int = 0, days: int = 7) -> List[Dict]:
        """
        Get how many cards would be due on each of the next days.

        Assumes no reviews happen in between.

        Args:
            start_day: First day to forecast
            days: Number of days to forecast

        Returns:
            List of {day, count}
        """
        ordered = to_ordered_buckets(self.buckets)
        return [
            {"day": day, "count": len(select_due_cards(ordered, day, self.due_policy))}
            for day in range(start_day, start_day + days)
        ]
