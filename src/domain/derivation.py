"""
Derivation Module

Turns a workspace snapshot into the aggregates shown on the dashboard:
crew resolution, payroll projection, crew health, risk flags and
suggested actions.

Every function here is pure. The only notion of "now" is the `today`
argument, so identical inputs always give identical output.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, TypeVar, Union

from infrastructure.date_utils import days_between

from .entities import (
    AttendanceRecord, Contractor, LabourStatus, Payment, PaymentCategory,
    Worker, WorkspaceSnapshot
)


def _default_weights() -> Dict[LabourStatus, float]:
    return {
        LabourStatus.PRESENT: 1.0,
        LabourStatus.STANDBY: 0.5,
        LabourStatus.LEAVE: 0.0,
        LabourStatus.ABSENT: 0.0,
    }


@dataclass(frozen=True)
class DerivationPolicy:
    """
    Policy constants for the projection and risk rules.

    Attributes:
        presence_weights: Share of the daily rate a worker costs per status
        working_days_per_week: Days in the weekly burn assumption
        budget_exposure_ratio: Budget share above which projected spend is flagged
        short_crew_leave_threshold: Workers on leave that make the crew "short"
        deduction_review_threshold: Deductions must exceed this to suggest a review
        redeploy_target: Where standby crew is suggested to go
        recent_attendance_limit: Rows kept in the recent attendance feed
    """
    presence_weights: Dict[LabourStatus, float] = field(default_factory=_default_weights)
    working_days_per_week: int = 6
    budget_exposure_ratio: float = 0.4
    short_crew_leave_threshold: int = 2
    deduction_review_threshold: int = 1
    redeploy_target: str = "BlueWave shaft prep"
    recent_attendance_limit: int = 6

    def weight_for(self, status: LabourStatus) -> float:
        return self.presence_weights.get(status, 0.0)


DEFAULT_POLICY = DerivationPolicy()

SHORT_CREW_FLAG = "Crew short by {count} specialist{plural} today."
BUDGET_EXPOSURE_FLAG = "Budget exposure: tighten purchase approvals."
ATTENDANCE_FOLLOW_UP_FLAG = "Attendance drops flagged for supervisor follow-up."


@dataclass(frozen=True)
class ActionSuggestion:
    """A suggested next move for the coordination call."""
    title: str
    detail: str
    category: str


@dataclass(frozen=True)
class CrewTotals:
    """
    Aggregate payroll and presence figures for the crew in scope.

    Attributes:
        daily_spend: Projected payroll for today from rates and statuses
        total_payments: Sum of scoped payment amounts
        present_count: Crew members currently present
        off_count: Crew members not present
        crew_health_pct: Present crew as a rounded percentage of target
    """
    daily_spend: float = 0.0
    total_payments: float = 0.0
    present_count: int = 0
    off_count: int = 0
    crew_health_pct: int = 0


@dataclass(frozen=True)
class DashboardView:
    """Everything the dashboard renders, derived from one snapshot."""
    contractor: Optional[Contractor]
    crew: Tuple[Worker, ...]
    attendance_in_scope: Tuple[AttendanceRecord, ...]
    payments_in_scope: Tuple[Payment, ...]
    totals: CrewTotals
    risk_flags: Tuple[str, ...]
    actions: Tuple[ActionSuggestion, ...]
    recent_attendance: Tuple[AttendanceRecord, ...]
    standby_count: int = 0


_Scoped = TypeVar("_Scoped", AttendanceRecord, Payment)


def _plural(count: int) -> str:
    return "s" if count > 1 else ""


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def count_with_status(crew: Iterable[Worker], status: LabourStatus) -> int:
    return sum(1 for worker in crew if worker.status == status)


def resolve_selected_contractor(
    contractors: Iterable[Contractor],
    selected_id: Optional[str]
) -> Optional[Contractor]:
    """Find the selected contractor; an unknown or empty id resolves to None."""
    if selected_id is None:
        return None
    for contractor in contractors:
        if contractor.id == selected_id:
            return contractor
    return None


def resolve_crew(
    workers: Iterable[Worker],
    contractor: Optional[Contractor]
) -> Tuple[Worker, ...]:
    """Workers of the given contractor, or every worker when none is selected."""
    if contractor is None:
        return tuple(workers)
    return tuple(w for w in workers if w.contractor_id == contractor.id)


def scope_records(
    records: Iterable[_Scoped],
    crew: Iterable[Worker]
) -> Tuple[_Scoped, ...]:
    """Keep records whose worker is in the crew, preserving order."""
    crew_ids = {worker.id for worker in crew}
    return tuple(r for r in records if r.worker_id in crew_ids)


def calculate_daily_spend(
    crew: Iterable[Worker],
    policy: DerivationPolicy = DEFAULT_POLICY
) -> float:
    """Sum of daily rate times presence weight over the crew."""
    return sum(w.daily_rate * policy.weight_for(w.status) for w in crew)


def calculate_crew_health(
    present_count: int,
    crew_size: int,
    contractor: Optional[Contractor]
) -> int:
    """
    Present crew as a percentage of the target headcount.

    The target is the contractor's crew_size_target, or the crew size when
    no contractor is selected (or the target is not positive). An empty
    crew is 0%.
    """
    if crew_size == 0:
        return 0
    target = crew_size
    if contractor is not None and contractor.crew_size_target > 0:
        target = contractor.crew_size_target
    return _round_half_up(present_count / target * 100)


def calculate_totals(
    crew: Sequence[Worker],
    payments_in_scope: Iterable[Payment],
    contractor: Optional[Contractor],
    policy: DerivationPolicy = DEFAULT_POLICY
) -> CrewTotals:
    present_count = count_with_status(crew, LabourStatus.PRESENT)
    return CrewTotals(
        daily_spend=calculate_daily_spend(crew, policy),
        total_payments=sum(p.amount for p in payments_in_scope),
        present_count=present_count,
        off_count=len(crew) - present_count,
        crew_health_pct=calculate_crew_health(present_count, len(crew), contractor),
    )


def is_budget_exposed(
    contractor: Optional[Contractor],
    daily_spend: float,
    today: Union[date, datetime],
    policy: DerivationPolicy = DEFAULT_POLICY
) -> bool:
    """
    Whether the projected spend to contract end exceeds the exposure share of budget.

    weekly_burn = daily_spend * working_days_per_week
    projected   = weekly_burn * (days_remaining / working_days_per_week)
    """
    if contractor is None:
        return False
    weekly_burn = daily_spend * policy.working_days_per_week
    if not weekly_burn:
        return False
    days_remaining = days_between(today, contractor.end_date)
    if days_remaining <= 0:
        return False
    projected_spend = weekly_burn * (days_remaining / policy.working_days_per_week)
    return projected_spend > contractor.budget * policy.budget_exposure_ratio


def derive_risk_flags(
    crew: Sequence[Worker],
    attendance_in_scope: Iterable[AttendanceRecord],
    contractor: Optional[Contractor],
    daily_spend: float,
    today: Union[date, datetime],
    policy: DerivationPolicy = DEFAULT_POLICY
) -> List[str]:
    """Risk flags in fixed order; each rule is evaluated independently."""
    flags: List[str] = []

    on_leave = count_with_status(crew, LabourStatus.LEAVE)
    if on_leave >= policy.short_crew_leave_threshold:
        flags.append(SHORT_CREW_FLAG.format(count=on_leave, plural=_plural(on_leave)))

    if is_budget_exposed(contractor, daily_spend, today, policy):
        flags.append(BUDGET_EXPOSURE_FLAG)

    if any(r.presence == LabourStatus.ABSENT for r in attendance_in_scope):
        flags.append(ATTENDANCE_FOLLOW_UP_FLAG)

    return flags


def derive_action_suggestions(
    crew: Sequence[Worker],
    payments_in_scope: Iterable[Payment],
    policy: DerivationPolicy = DEFAULT_POLICY
) -> List[ActionSuggestion]:
    """Suggested actions in fixed order; the brief suggestion is always last."""
    items: List[ActionSuggestion] = []

    standby = count_with_status(crew, LabourStatus.STANDBY)
    if standby:
        items.append(ActionSuggestion(
            title="Redeploy standby crew",
            detail=(
                f"Assign {standby} standby member{_plural(standby)} "
                f"to {policy.redeploy_target}."
            ),
            category="Crew",
        ))

    deductions = sum(1 for p in payments_in_scope if p.category == PaymentCategory.DEDUCTION)
    if deductions > policy.deduction_review_threshold:
        items.append(ActionSuggestion(
            title="Review deductions",
            detail="Multiple deductions this week - align with contractor rep.",
            category="Finance",
        ))

    items.append(ActionSuggestion(
        title="Daily AI brief",
        detail="Use quick brief below to align contractor, labour captain, and supplier.",
        category="AI Agent",
    ))
    return items


def derive_dashboard(
    snapshot: WorkspaceSnapshot,
    today: Union[date, datetime],
    policy: DerivationPolicy = DEFAULT_POLICY
) -> DashboardView:
    """
    Run the full derivation pipeline over a snapshot.

    Args:
        snapshot: Store state to derive from
        today: Reference date for the budget projection
        policy: Policy constants (defaults to the standard site policy)

    Returns:
        DashboardView with crew, scoped logs, totals, flags and actions
    """
    contractor = resolve_selected_contractor(
        snapshot.contractors, snapshot.selected_contractor_id
    )
    crew = resolve_crew(snapshot.workers, contractor)
    attendance_in_scope = scope_records(snapshot.attendance, crew)
    payments_in_scope = scope_records(snapshot.payments, crew)

    totals = calculate_totals(crew, payments_in_scope, contractor, policy)
    flags = derive_risk_flags(
        crew, attendance_in_scope, contractor, totals.daily_spend, today, policy
    )
    actions = derive_action_suggestions(crew, payments_in_scope, policy)

    return DashboardView(
        contractor=contractor,
        crew=crew,
        attendance_in_scope=attendance_in_scope,
        payments_in_scope=payments_in_scope,
        totals=totals,
        risk_flags=tuple(flags),
        actions=tuple(actions),
        recent_attendance=attendance_in_scope[:max(policy.recent_attendance_limit, 0)],
        standby_count=count_with_status(crew, LabourStatus.STANDBY),
    )
