class CorruptHighScoreError(ValueError):
    """Stored high score is not a non-negative integer."""
