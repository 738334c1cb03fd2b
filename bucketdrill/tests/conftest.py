"""
Shared test fixtures for bucket scheduling tests.

Provides:
- Sample flashcards with and without hints/tags
- A sparse bucket map
- A BucketEngine isolated from environment overrides
- A LearningService wired to that engine
"""

import pytest
from typing import List

from bucketdrill.flashcards.engine import BucketEngine
from bucketdrill.flashcards.models import Flashcard, BucketMap
from bucketdrill.services.learning_service import LearningService


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep local .env settings out of the tests."""
    monkeypatch.delenv("BUCKET_MASTERY_THRESHOLD", raising=False)
    monkeypatch.delenv("BUCKET_DUE_POLICY", raising=False)


@pytest.fixture
def cards() -> List[Flashcard]:
    """Three cards: one hinted and tagged, two plain."""
    return [
        Flashcard("2 + 2", "4", hint="Count on your fingers", tags=["math"]),
        Flashcard("Capital of France", "Paris", tags=["geography"]),
        Flashcard("H2O", "Water"),
    ]


@pytest.fixture
def sparse_buckets() -> BucketMap:
    """Buckets 0, 1 and 3 with one card each; bucket 2 missing."""
    return {
        0: {Flashcard("Q1", "A1")},
        1: {Flashcard("Q2", "A2")},
        3: {Flashcard("Q3", "A3")},
    }


@pytest.fixture
def engine(cards) -> BucketEngine:
    return BucketEngine(cards, mastery_threshold=3, due_policy="fixed")


@pytest.fixture
def service(engine) -> LearningService:
    return LearningService(engine)
