from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Protocol, Union

from .exceptions import CorruptHighScoreError

logger = logging.getLogger(__name__)

HIGH_SCORE_KEY = "tetrisHighScore"


class HighScoreStore(Protocol):
    def get(self) -> int: ...

    def set(self, value: int) -> None: ...


def parse_high_score(raw: Any) -> int:
    """Validate a stored high score.

    Accepts an int or a decimal string holding a non-negative integer and
    raises `CorruptHighScoreError` for anything else.
    """
    if isinstance(raw, bool):
        raise CorruptHighScoreError(f"not an integer: {raw!r}")
    if isinstance(raw, str):
        text = raw.strip()
        try:
            value = int(text)
        except ValueError:
            raise CorruptHighScoreError(f"not an integer: {raw!r}") from None
        if not (text.isascii() and text.isdigit()):
            raise CorruptHighScoreError(f"not an integer: {raw!r}")
        return value
    if not isinstance(raw, int):
        raise CorruptHighScoreError(f"not an integer: {raw!r}")
    if raw < 0:
        raise CorruptHighScoreError(f"negative high score: {raw}")
    return raw


class MemoryHighScoreStore:
    def __init__(self, value: int = 0) -> None:
        self.value = value

    def get(self) -> int:
        return self.value

    def set(self, value: int) -> None:
        self.value = int(value)


class JsonHighScoreStore:
    """High score kept in a JSON object under a single key.

    Unreadable or malformed files read as 0. Write failures are logged and
    the in-memory value keeps serving `get`.
    """

    def __init__(self, path: Union[str, os.PathLike], key: str = HIGH_SCORE_KEY) -> None:
        self.path = Path(path)
        self.key = key
        self._cached: int | None = None

    def get(self) -> int:
        if self._cached is None:
            self._cached = self._load()
        return self._cached

    def _load(self) -> int:
        if not self.path.exists():
            return 0
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("could not read high score from %s: %s", self.path, exc)
            return 0
        if not isinstance(data, dict) or self.key not in data:
            return 0
        try:
            return parse_high_score(data[self.key])
        except CorruptHighScoreError as exc:
            logger.warning("ignoring corrupt high score in %s: %s", self.path, exc)
            return 0

    def set(self, value: int) -> None:
        self._cached = int(value)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps({self.key: self._cached}), encoding="utf-8")
        except OSError as exc:
            logger.warning("could not write high score to %s: %s", self.path, exc)
