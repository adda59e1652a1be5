from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoringRules:
    run_length: int = 5
    points_per_cell: int = 1

    def score_for_clear(self, cells_cleared: int) -> int:
        if cells_cleared <= 0:
            return 0
        return cells_cleared * self.points_per_cell
