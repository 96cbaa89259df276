"""
Suggestion engine: alternatives offered when a requested series collides.

Three independent proposals, each optional:

  shorten           keep the series, but stop before the first unavailable date
  contiguous_block  the longest correctly-spaced free run anywhere in the series
  adjust_start      move the whole series to the nearest start with no conflicts

`None` means "not computed / nothing found"; an empty DateRun means "computed,
and the answer is zero dates".
"""

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Any, Callable, Optional, Sequence

from deskbook.domain.plan import BookingPlan
from deskbook.domain.recurrence import expand_recurrence, recurrence_stepper

PREVIEW_LOOKAHEAD_DAYS = 365

Stepper = Optional[Callable[[date], date]]


@dataclass(frozen=True)
class DateRun:
    dates: tuple[date, ...] = ()

    @property
    def count(self) -> int:
        return len(self.dates)

    @property
    def start_date(self) -> Optional[date]:
        return self.dates[0] if self.dates else None


@dataclass(frozen=True)
class AdjustedStart:
    start_date: date
    dates: tuple[date, ...]


@dataclass(frozen=True)
class Suggestions:
    shorten: Optional[DateRun] = None
    contiguous_block: Optional[DateRun] = None
    adjust_start: Optional[AdjustedStart] = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.shorten is not None:
            payload["shorten"] = {"count": self.shorten.count, "dates": list(self.shorten.dates)}
        if self.contiguous_block is not None:
            payload["contiguous_block"] = {
                "start_date": self.contiguous_block.start_date,
                "count": self.contiguous_block.count,
                "dates": list(self.contiguous_block.dates),
            }
        if self.adjust_start is not None:
            payload["adjust_start"] = {
                "start_date": self.adjust_start.start_date,
                "dates": list(self.adjust_start.dates),
            }
        return payload


def collect_run(
    target_dates: Sequence[date],
    start_index: int,
    available: set[date],
    stepper: Stepper,
) -> list[date]:
    """
    Available dates from `start_index` onward, stopping at the first date that is
    either taken or not the stepper's successor of the previous one.
    """
    run: list[date] = []
    previous: Optional[date] = None

    for current in target_dates[start_index:]:
        if current not in available:
            break
        if previous is not None and stepper is not None and stepper(previous) != current:
            break
        run.append(current)
        previous = current

    return run


def find_longest_run(
    target_dates: Sequence[date],
    available: set[date],
    stepper: Stepper,
) -> Optional[DateRun]:
    best: list[date] = []
    for index, current in enumerate(target_dates):
        if current not in available:
            continue
        run = collect_run(target_dates, index, available, stepper)
        # strict comparison keeps the earliest run on ties
        if len(run) > len(best):
            best = run

    if not best:
        return None
    return DateRun(dates=tuple(best))


def find_adjusted_start(
    plan: BookingPlan, lookahead_days: int = PREVIEW_LOOKAHEAD_DAYS
) -> Optional[AdjustedStart]:
    """Earliest start in [start, start + lookahead] whose expansion is conflict-free."""
    if plan.requested_count == 0:
        return None

    for offset in range(lookahead_days + 1):
        candidate = plan.start_date + timedelta(days=offset)
        dates = expand_recurrence(candidate, plan.recurrence)
        if not plan.index.has_any(dates):
            return AdjustedStart(start_date=candidate, dates=tuple(dates))

    return None


def compute_suggestions(
    plan: BookingPlan, lookahead_days: int = PREVIEW_LOOKAHEAD_DAYS
) -> Suggestions:
    shorten = None
    contiguous = None
    available = set(plan.available_dates)
    stepper = recurrence_stepper(plan.recurrence)

    if plan.requested_count > 0:
        shorten = DateRun(dates=tuple(collect_run(plan.target_dates, 0, available, stepper)))
        contiguous = find_longest_run(plan.target_dates, available, stepper)

    adjust_start = None
    adjusted = find_adjusted_start(plan, lookahead_days)
    # Only worth reporting when it tells the caller something new
    if adjusted is not None and (plan.has_conflicts or adjusted.start_date != plan.start_date):
        adjust_start = adjusted

    return Suggestions(shorten=shorten, contiguous_block=contiguous, adjust_start=adjust_start)
