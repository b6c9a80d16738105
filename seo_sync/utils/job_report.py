"""
job_report.py
Counters returned by every sheet-driven job so the HTTP layer and the CLI
can summarise a run.
"""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class JobReport:
    job: str
    processed: int = 0
    updated: int = 0
    failed: int = 0
    skipped: int = 0
    missing: int = 0
    error: Optional[str] = None
    reasons: Counter = field(default_factory=Counter)

    @property
    def ok(self) -> bool:
        return self.error is None

    def summary(self) -> str:
        parts = [
            f"processed={self.processed}",
            f"updated={self.updated}",
            f"failed={self.failed}",
            f"skipped={self.skipped}",
            f"missing={self.missing}",
        ]
        if self.reasons:
            parts.append("reasons=" + ",".join(f"{k}:{v}" for k, v in sorted(self.reasons.items())))
        if self.error:
            parts.append(f"error={self.error}")
        return f"[{self.job}] " + " ".join(parts)
