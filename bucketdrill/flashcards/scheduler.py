"""
Bucket Scheduler - Leitner-style spaced repetition.

Every card sits in exactly one proficiency bucket. Practice outcomes move it:
  WRONG - back to bucket 0
  HARD  - stays where it is
  EASY  - promoted one bucket

Under the default policy bucket k is due on day k. The due predicate is a
plain function of (bucket, day) and can be swapped per call.
"""

import logging
from typing import Callable, Iterable, List, Optional, Sequence, Set

from .models import (
    MASTERY_THRESHOLD,
    AnswerDifficulty,
    BucketMap,
    BucketRange,
    Flashcard,
    PracticeRecord,
    Progress,
)

logger = logging.getLogger(__name__)

DuePolicy = Callable[[int, int], bool]


def is_due_on_day(bucket: int, day: int) -> bool:
    """Fixed policy: bucket k is due exactly on day k."""
    return bucket == day


def is_due_exponential(bucket: int, day: int) -> bool:
    """Bucket k is due every 2**k days, starting on day 0."""
    if day < 0:
        return False
    return day % (2 ** bucket) == 0


def to_ordered_buckets(buckets: BucketMap) -> List[Set[Flashcard]]:
    """
    Flatten a sparse bucket map into a dense list.

    Args:
        buckets: Bucket index -> cards, possibly empty or with gaps

    Returns:
        List indexed 0..max bucket; missing indices are empty sets. An empty
        map gives a single empty set so index 0 is always safe.
    """
    max_bucket = max(list(buckets.keys()) + [0])
    return [set(buckets.get(i, ())) for i in range(max_bucket + 1)]


def get_active_bucket_range(buckets: Sequence[Set[Flashcard]]) -> Optional[BucketRange]:
    """Return the lowest and highest non-empty bucket, or None if all are empty."""
    active = [i for i, cards in enumerate(buckets) if cards]
    if not active:
        return None
    return BucketRange(min_bucket=active[0], max_bucket=active[-1])


def select_due_cards(
    buckets: Sequence[Set[Flashcard]],
    day: int,
    is_due: DuePolicy = is_due_on_day
) -> Set[Flashcard]:
    """
    Pick the cards to practice on a given day.

    Args:
        buckets: Ordered buckets as produced by to_ordered_buckets
        day: Day number; days outside the bucket range select nothing
        is_due: Predicate deciding whether bucket b is due on day d

    Returns:
        A new set, never one of the caller's bucket sets
    """
    due: Set[Flashcard] = set()
    for bucket, cards in enumerate(buckets):
        if cards and is_due(bucket, day):
            due.update(cards)
    return due


def find_bucket(buckets: BucketMap, card: Flashcard) -> Optional[int]:
    """Lowest bucket index holding the card, or None if it is not in the map."""
    for bucket in sorted(buckets):
        if card in buckets[bucket]:
            return bucket
    return None


def _discard_everywhere(buckets: BucketMap, card: Flashcard):
    for cards in buckets.values():
        cards.discard(card)


def place_card(buckets: BucketMap, card: Flashcard, bucket: int = 0) -> BucketMap:
    """
    Put a card in a bucket, removing it from any other bucket first.

    Raises:
        ValueError: if bucket is negative
    """
    if bucket < 0:
        raise ValueError(f"Bucket index must be non-negative, got {bucket}")
    _discard_everywhere(buckets, card)
    buckets.setdefault(bucket, set()).add(card)
    return buckets


def new_bucket_map(cards: Iterable[Flashcard] = ()) -> BucketMap:
    """Fresh bucket map with every card in bucket 0."""
    return {0: set(cards)}


def record_outcome(
    buckets: BucketMap,
    card: Flashcard,
    difficulty: AnswerDifficulty
) -> BucketMap:
    """
    Move a card according to how the learner answered.

    The map is updated in place and the same instance is returned. A card
    not found in any bucket is treated as sitting in bucket 0.

    Args:
        buckets: Bucket map to update
        card: Card that was practiced
        difficulty: Reported outcome

    Returns:
        The mutated input map

    Raises:
        TypeError: if difficulty is not an AnswerDifficulty; the map is left untouched
    """
    if not isinstance(difficulty, AnswerDifficulty):
        raise TypeError(f"Expected AnswerDifficulty, got {difficulty!r}")

    current = find_bucket(buckets, card)
    if current is None:
        current = 0

    if difficulty is AnswerDifficulty.WRONG:
        new_bucket = 0
    elif difficulty is AnswerDifficulty.HARD:
        new_bucket = current
    elif difficulty is AnswerDifficulty.EASY:
        new_bucket = current + 1

    _discard_everywhere(buckets, card)
    buckets.setdefault(new_bucket, set()).add(card)
    logger.debug(f"{card.front[:40]!r}: bucket {current} -> {new_bucket} ({difficulty.value})")
    return buckets


def render_hint(card: Flashcard) -> str:
    if card.hint:
        return f"Hint: {card.hint}"
    return "No hint available"


def compute_progress(
    buckets: BucketMap,
    history: Iterable[PracticeRecord] = (),
    mastery_threshold: int = MASTERY_THRESHOLD
) -> Progress:
    """
    Summarize mastery across the collection.

    Counts come from bucket membership only; history is accepted so callers
    can pass what they have, but does not change the numbers.

    Args:
        buckets: Bucket map to count
        history: Practice records
        mastery_threshold: Lowest bucket that counts as mastered

    Returns:
        Progress with the percentage rounded to 2 decimals
    """
    total = 0
    mastered = 0
    for bucket, cards in buckets.items():
        total += len(cards)
        if bucket >= mastery_threshold:
            mastered += len(cards)

    reviews = sum(1 for _ in history)
    logger.debug(f"Progress over {total} cards, {reviews} practice records")

    percentage = round(mastered / total * 100, 2) if total > 0 else 0.0
    return Progress(
        total_cards=total,
        mastered_cards=mastered,
        mastery_percentage=percentage
    )
