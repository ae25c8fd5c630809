"""Service layer: question bank, progress persistence, evaluation, sessions."""
