"""Services built on the bucket scheduler."""
from .learning_service import LearningService, LearningStats, get_learning_service

__all__ = [
    "LearningService",
    "LearningStats",
    "get_learning_service",
]
