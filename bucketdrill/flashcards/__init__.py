"""
Flashcard scheduling with Leitner-style buckets.

Components:
- models: Flashcard, AnswerDifficulty and report types
- scheduler: pure bucket operations
- BucketEngine: in-memory card collection built on the scheduler
"""

from .models import (
    MASTERY_THRESHOLD,
    AnswerDifficulty,
    BucketMap,
    BucketRange,
    Flashcard,
    PracticeRecord,
    Progress,
)
from .scheduler import (
    compute_progress,
    find_bucket,
    get_active_bucket_range,
    is_due_exponential,
    is_due_on_day,
    new_bucket_map,
    place_card,
    record_outcome,
    render_hint,
    select_due_cards,
    to_ordered_buckets,
)
from .engine import BucketEngine, resolve_due_policy

__all__ = [
    "MASTERY_THRESHOLD",
    "AnswerDifficulty",
    "BucketMap",
    "BucketRange",
    "Flashcard",
    "PracticeRecord",
    "Progress",
    "compute_progress",
    "find_bucket",
    "get_active_bucket_range",
    "is_due_exponential",
    "is_due_on_day",
    "new_bucket_map",
    "place_card",
    "record_outcome",
    "render_hint",
    "select_due_cards",
    "to_ordered_buckets",
    "BucketEngine",
    "resolve_due_policy",
]
