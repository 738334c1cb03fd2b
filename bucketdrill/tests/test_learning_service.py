"""
Tests for LearningService practice sessions.

Run with:
    pytest bucketdrill/tests/test_learning_service.py -v
"""

import pytest

from bucketdrill.flashcards.engine import BucketEngine
from bucketdrill.flashcards.models import AnswerDifficulty
from bucketdrill.services import learning_service
from bucketdrill.services.learning_service import (
    LearningService,
    LearningStats,
    get_learning_service,
)


class TestPracticeSession:

    def test_start_day_queues_due_cards(self, service, cards):
        queued = service.start_day(0)
        assert len(queued) == 3
        assert service.day == 0

    def test_walk_through_day(self, service):
        service.start_day(0)
        seen = []
        while True:
            card = service.get_next_card()
            if card is None:
                break
            seen.append(card)
            result = service.rate_current_card(AnswerDifficulty.EASY)
            assert result["new_bucket"] == 1
            assert "Moved up to bucket 1" in result["message"]

        assert len(seen) == 3
        stats = service.get_session_stats()
        assert stats["reviewed"] == 3
        assert stats["correct"] == 3
        assert stats["accuracy"] == 100.0
        assert stats["remaining"] == 0

    def test_next_card_repeats_until_rated(self, service):
        service.start_day(0)
        first = service.get_next_card()
        assert service.get_next_card() == first
        assert service.get_current_card() == first

    def test_rate_without_card(self, service):
        assert service.rate_current_card("easy") == {"error": "No current card to rate"}

    def test_invalid_rating_keeps_current_card(self, service):
        service.start_day(0)
        card = service.get_next_card()
        result = service.rate_current_card("so-so")
        assert "error" in result
        assert service.get_current_card() == card
        assert service.get_session_stats()["reviewed"] == 0

    def test_messages(self, service):
        service.start_day(0)
        service.get_next_card()
        assert "Staying in bucket 0" in service.rate_current_card("hard")["message"]
        service.get_next_card()
        assert "back to bucket 0" in service.rate_current_card("wrong")["message"]

    def test_accuracy_counts_hard_as_correct(self, service):
        service.start_day(0)
        service.get_next_card()
        service.rate_current_card("hard")
        service.get_next_card()
        service.rate_current_card("wrong")
        stats = service.get_session_stats()
        assert stats["correct"] == 1
        assert stats["accuracy"] == 50.0
        assert stats["remaining"] == 1

    def test_show_hint(self, service, cards):
        assert service.show_hint() == "No current card"
        service.start_day(0, tags=["math"])
        assert service.get_next_card() == cards[0]
        assert service.show_hint() == "Hint: Count on your fingers"

    def test_reset_session_drops_rest_of_day(self, service, engine):
        service.start_day(0)
        card = service.get_next_card()
        service.rate_current_card("easy")
        finished = service.reset_session()
        assert finished["reviewed"] == 1
        assert finished["remaining"] == 2

        stats = service.get_session_stats()
        assert stats["reviewed"] == 0
        assert stats["remaining"] == 0
        assert stats["day"] == 0
        assert service.get_current_card() is None
        assert engine.get_bucket(card) == 1


class TestLearningStats:

    def test_stats_from_engine(self, service, engine, cards):
        for _ in range(3):
            engine.review_card(cards[0], "easy")
        service.start_day(0)
        stats = service.get_stats()
        assert stats.total_cards == 3
        assert stats.due_today == 2
        assert stats.mastered == 1
        assert stats.reviews == 3
        assert stats.retention_rate == 100.0

    def test_summary(self):
        stats = LearningStats(
            total_cards=4, due_today=2, mastered=1,
            mastery_percentage=25.0, reviews=5, retention_rate=80.0
        )
        assert stats.to_summary() == (
            "2 of 4 cards up for practice today; "
            "1 in the mastered buckets (25%); "
            "80% of 5 answers were hard or easy."
        )

    def test_summary_before_any_practice(self):
        stats = LearningStats(total_cards=3, due_today=3)
        assert stats.to_summary() == "3 of 3 cards up for practice today."

    def test_summary_empty_deck(self):
        assert LearningStats().to_summary() == "The deck is empty."


class TestSharedService:

    def test_shared_instance(self, monkeypatch):
        monkeypatch.setattr(learning_service, "_learning_service", None)
        assert get_learning_service() is get_learning_service()
        assert isinstance(get_learning_service(), LearningService)

    def test_shared_instance_bound_to_engine(self, monkeypatch, engine):
        monkeypatch.setattr(learning_service, "_learning_service", None)
        service = get_learning_service(engine)
        assert get_learning_service() is service
        assert get_learning_service(engine) is service
        assert service.start_day(0) == engine.get_due_cards(0)

    def test_shared_instance_rejects_other_engine(self, monkeypatch, engine):
        monkeypatch.setattr(learning_service, "_learning_service", None)
        get_learning_service(engine)
        with pytest.raises(ValueError):
            get_learning_service(BucketEngine())
