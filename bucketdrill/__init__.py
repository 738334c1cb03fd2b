"""
bucketdrill - Leitner-style spaced repetition for flashcards.

Packages:
- flashcards: card model, bucket scheduler and BucketEngine
- services: LearningService practice sessions
"""
