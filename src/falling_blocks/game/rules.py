from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    line_clear_scores: tuple[int, int, int, int] = (100, 300, 500, 800)
    lines_per_level: int = 10
    base_interval_ms: int = 1200
    interval_step_ms: int = 80
    min_interval_ms: int = 500

    def score_for_lines(self, lines: int) -> int:
        if 1 <= lines <= len(self.line_clear_scores):
            return self.line_clear_scores[lines - 1]
        return 0

    def level_for_lines(self, total_lines: int) -> int:
        return max(0, total_lines) // self.lines_per_level + 1

    def gravity_interval_ms(self, level: int) -> int:
        return max(self.min_interval_ms, self.base_interval_ms - (level - 1) * self.interval_step_ms)
