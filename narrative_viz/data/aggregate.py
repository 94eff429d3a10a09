from __future__ import annotations
from dataclasses import dataclass
from datetime import date
from typing import Dict, List
import logging

from .normalize import AGE_BINS, DataSet

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReconciliationFinding:
    """A record whose age bins do not add up to its reported case count."""
    date: date
    cases: int
    age_total: int

    @property
    def delta(self) -> int:
        return self.age_total - self.cases


def age_bin_totals(ds: DataSet) -> Dict[str, int]:
    """Exact integer total per age bin, in fixed bin order."""
    totals = {b: 0 for b in AGE_BINS}
    for r in ds:
        for b in AGE_BINS:
            totals[b] += r.age_groups[b]
    return totals


def reconcile_age_bins(ds: DataSet) -> List[ReconciliationFinding]:
    """
    Compare each record's bin sum with its `cases` value.

    Mismatches are a property of the source data, not an error: they are
    returned (and logged) so a reader can judge them, and nothing is adjusted.
    """
    findings = [
        ReconciliationFinding(date=r.date, cases=r.cases, age_total=r.age_total)
        for r in ds
        if r.age_total != r.cases
    ]
    if findings:
        total_cases = sum(r.cases for r in ds)
        total_bins = sum(age_bin_totals(ds).values())
        log.warning(
            "age bins do not partition case counts",
            extra={"mismatched_records": len(findings), "total_cases": total_cases, "total_age_bins": total_bins},
        )
    return findings
