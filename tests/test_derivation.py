"""
Unit tests for the derivation pipeline: crew resolution, totals,
risk flags and action suggestions.
"""

from datetime import date, datetime, timedelta
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.derivation import (
    ATTENDANCE_FOLLOW_UP_FLAG, BUDGET_EXPOSURE_FLAG, DerivationPolicy,
    calculate_crew_health, calculate_daily_spend, calculate_totals,
    derive_action_suggestions, derive_dashboard, derive_risk_flags,
    is_budget_exposed, resolve_crew, resolve_selected_contractor, scope_records
)
from domain.entities import (
    AttendanceRecord, Contractor, LabourStatus, Payment, PaymentCategory,
    Worker, WorkspaceSnapshot
)
from domain.seed import seed_snapshot

TODAY = date(2025, 3, 12)


def make_contractor(
    contractor_id: str = "c1",
    budget: float = 100000,
    days_remaining: int = 30,
    crew_size_target: int = 12
) -> Contractor:
    return Contractor(
        id=contractor_id, name=f"Contractor {contractor_id}", company="Co",
        scope="Plumbing", budget=budget, start_date=TODAY - timedelta(days=10),
        end_date=TODAY + timedelta(days=days_remaining),
        crew_size_target=crew_size_target,
    )


def make_worker(
    worker_id: str,
    status: LabourStatus = LabourStatus.PRESENT,
    daily_rate: float = 1000,
    contractor_id: str = "c1"
) -> Worker:
    return Worker(
        id=worker_id, name=f"Worker {worker_id}", trade="Fitter",
        daily_rate=daily_rate, status=status, contractor_id=contractor_id,
    )


def make_attendance(record_id: str, worker_id: str, presence: LabourStatus) -> AttendanceRecord:
    return AttendanceRecord(
        id=record_id, worker_id=worker_id, date=TODAY, hours_worked=8,
        presence=presence, site="Tower B",
    )


def make_payment(payment_id: str, worker_id: str, amount: float,
                 category: PaymentCategory = PaymentCategory.ADVANCE) -> Payment:
    return Payment(id=payment_id, worker_id=worker_id, amount=amount,
                   date=TODAY, category=category)


class TestCrewResolution:
    """Tests for contractor and crew resolution."""

    def test_crew_of_selected_contractor(self):
        c1, c2 = make_contractor("c1"), make_contractor("c2")
        workers = [make_worker("w1"), make_worker("w2", contractor_id="c2")]
        assert [w.id for w in resolve_crew(workers, c1)] == ["w1"]
        assert [w.id for w in resolve_crew(workers, c2)] == ["w2"]

    def test_no_selection_means_all_workers(self):
        workers = [make_worker("w1"), make_worker("w2", contractor_id="c2")]
        assert len(resolve_crew(workers, None)) == 2

    def test_unknown_selection_resolves_to_no_contractor(self):
        contractors = [make_contractor("c1")]
        assert resolve_selected_contractor(contractors, "unknown-id") is None
        assert resolve_selected_contractor(contractors, None) is None

    def test_unknown_selection_falls_back_to_all_workers(self):
        snapshot = WorkspaceSnapshot(
            contractors=(make_contractor("c1"),),
            workers=(make_worker("w1"), make_worker("w2", contractor_id="c9")),
            selected_contractor_id="unknown-id",
        )
        view = derive_dashboard(snapshot, TODAY)
        assert view.contractor is None
        assert len(view.crew) == 2
        # Target falls back to crew size
        assert view.totals.crew_health_pct == 100

    def test_dangling_contractor_reference_is_filtered(self):
        workers = [make_worker("w1", contractor_id="gone")]
        assert resolve_crew(workers, make_contractor("c1")) == ()

    def test_scope_records_keeps_order_and_drops_strangers(self):
        crew = [make_worker("w1"), make_worker("w2")]
        records = [
            make_attendance("a3", "w2", LabourStatus.PRESENT),
            make_attendance("a2", "ghost", LabourStatus.ABSENT),
            make_attendance("a1", "w1", LabourStatus.PRESENT),
        ]
        assert [r.id for r in scope_records(records, crew)] == ["a3", "a1"]


class TestTotals:
    """Tests for payroll and crew health aggregates."""

    def test_payroll_scenario(self):
        crew = [
            make_worker("w1", LabourStatus.PRESENT, 4200),
            make_worker("w2", LabourStatus.PRESENT, 4600),
            make_worker("w3", LabourStatus.LEAVE, 5800),
            make_worker("w4", LabourStatus.STANDBY, 3600),
        ]
        assert calculate_daily_spend(crew) == 10600

    def test_absent_costs_nothing(self):
        assert calculate_daily_spend([make_worker("w1", LabourStatus.ABSENT, 9000)]) == 0

    def test_custom_presence_weights(self):
        policy = DerivationPolicy(presence_weights={LabourStatus.PRESENT: 2.0})
        crew = [make_worker("w1", LabourStatus.PRESENT, 100),
                make_worker("w2", LabourStatus.STANDBY, 100)]
        assert calculate_daily_spend(crew, policy) == 200

    def test_crew_health_half_of_target(self):
        contractor = make_contractor(crew_size_target=12)
        crew = [make_worker(f"w{i}") for i in range(6)]
        totals = calculate_totals(crew, [], contractor)
        assert totals.crew_health_pct == 50

    def test_crew_health_empty_crew(self):
        assert calculate_crew_health(0, 0, make_contractor()) == 0
        assert calculate_crew_health(0, 0, None) == 0

    def test_crew_health_rounds_half_up(self):
        # 1 of 8 is 12.5%
        contractor = make_contractor(crew_size_target=8)
        assert calculate_crew_health(1, 3, contractor) == 13

    def test_crew_health_non_positive_target_uses_crew_size(self):
        contractor = make_contractor(crew_size_target=0)
        assert calculate_crew_health(1, 2, contractor) == 50

    def test_counts_and_payments(self):
        crew = [make_worker("w1"), make_worker("w2", LabourStatus.LEAVE),
                make_worker("w3", LabourStatus.STANDBY)]
        payments = [make_payment("p1", "w1", 12000), make_payment("p2", "w2", 18000)]
        totals = calculate_totals(crew, payments, None)
        assert totals.present_count == 1
        assert totals.off_count == 2
        assert totals.total_payments == 30000
        assert totals.crew_health_pct == 33


class TestRiskFlags:
    """Tests for risk flag derivation."""

    def test_two_on_leave_is_short_crew(self):
        crew = [make_worker("w1", LabourStatus.LEAVE), make_worker("w2", LabourStatus.LEAVE)]
        flags = derive_risk_flags(crew, [], None, 0, TODAY)
        assert flags == ["Crew short by 2 specialists today."]

    def test_one_on_leave_is_not_flagged(self):
        crew = [make_worker("w1", LabourStatus.LEAVE)]
        assert derive_risk_flags(crew, [], None, 0, TODAY) == []

    def test_budget_boundary_below(self):
        contractor = make_contractor(budget=100000, days_remaining=30)
        # weekly 6000, projected 30000, threshold 40000
        assert not is_budget_exposed(contractor, 1000, TODAY)

    def test_budget_boundary_above(self):
        contractor = make_contractor(budget=100000, days_remaining=30)
        # weekly 9000, projected 45000 > 40000
        assert is_budget_exposed(contractor, 1500, TODAY)
        flags = derive_risk_flags([], [], contractor, 1500, TODAY)
        assert flags == [BUDGET_EXPOSURE_FLAG]

    def test_budget_not_flagged_without_contractor(self):
        assert not is_budget_exposed(None, 10 ** 9, TODAY)

    def test_budget_not_flagged_when_contract_ended(self):
        assert not is_budget_exposed(make_contractor(budget=1, days_remaining=0), 5000, TODAY)
        assert not is_budget_exposed(make_contractor(budget=1, days_remaining=-5), 5000, TODAY)

    def test_budget_not_flagged_without_spend(self):
        assert not is_budget_exposed(make_contractor(budget=0), 0, TODAY)

    def test_budget_accepts_datetime(self):
        contractor = make_contractor(budget=100000, days_remaining=30)
        assert is_budget_exposed(contractor, 1500, datetime(2025, 3, 12, 18, 30))

    def test_absent_attendance_single_flag(self):
        crew = [make_worker("w1"), make_worker("w2")]
        records = [
            make_attendance("a1", "w1", LabourStatus.ABSENT),
            make_attendance("a2", "w2", LabourStatus.ABSENT),
        ]
        assert derive_risk_flags(crew, records, None, 0, TODAY) == [ATTENDANCE_FOLLOW_UP_FLAG]

    def test_flags_are_independent_and_ordered(self):
        contractor = make_contractor(budget=1000, days_remaining=30)
        crew = [make_worker("w1", LabourStatus.LEAVE, 500),
                make_worker("w2", LabourStatus.LEAVE, 500),
                make_worker("w3", LabourStatus.PRESENT, 500)]
        records = [make_attendance("a1", "w3", LabourStatus.ABSENT)]
        flags = derive_risk_flags(crew, records, contractor, 500, TODAY)
        assert flags == [
            "Crew short by 2 specialists today.",
            BUDGET_EXPOSURE_FLAG,
            ATTENDANCE_FOLLOW_UP_FLAG,
        ]


class TestActionSuggestions:
    """Tests for suggested actions."""

    def test_brief_always_last(self):
        actions = derive_action_suggestions([], [])
        assert [a.title for a in actions] == ["Daily AI brief"]
        assert actions[0].category == "AI Agent"

    def test_standby_redeployment_singular_and_plural(self):
        one = derive_action_suggestions([make_worker("w1", LabourStatus.STANDBY)], [])
        assert one[0].detail == "Assign 1 standby member to BlueWave shaft prep."
        two = derive_action_suggestions(
            [make_worker("w1", LabourStatus.STANDBY), make_worker("w2", LabourStatus.STANDBY)], []
        )
        assert two[0].detail == "Assign 2 standby members to BlueWave shaft prep."
        assert two[0].category == "Crew"

    def test_single_deduction_not_reviewed(self):
        payments = [make_payment("p1", "w1", 100, PaymentCategory.DEDUCTION)]
        assert [a.title for a in derive_action_suggestions([], payments)] == ["Daily AI brief"]

    def test_multiple_deductions_reviewed(self):
        payments = [make_payment(f"p{i}", "w1", 100, PaymentCategory.DEDUCTION) for i in range(2)]
        titles = [a.title for a in derive_action_suggestions([make_worker("w1", LabourStatus.STANDBY)], payments)]
        assert titles == ["Redeploy standby crew", "Review deductions", "Daily AI brief"]


class TestDeriveDashboard:
    """Tests for the full pipeline over the seeded workspace."""

    def test_seeded_first_contractor(self):
        view = derive_dashboard(seed_snapshot(TODAY), TODAY)
        assert view.contractor.id == "c1"
        assert [w.id for w in view.crew] == ["w1", "w2"]
        assert view.totals.daily_spend == 8800
        assert view.totals.total_payments == 30000
        assert view.totals.present_count == 2
        assert view.totals.crew_health_pct == 17
        assert [r.id for r in view.attendance_in_scope] == ["a1", "a2"]
        assert view.standby_count == 0

    def test_seeded_all_contractors(self):
        snapshot = seed_snapshot(TODAY)
        view = derive_dashboard(
            WorkspaceSnapshot(snapshot.contractors, snapshot.workers,
                              snapshot.attendance, snapshot.payments, None),
            TODAY
        )
        assert view.totals.daily_spend == 10600
        assert view.totals.crew_health_pct == 50
        assert view.standby_count == 1
        assert view.actions[0].title == "Redeploy standby crew"

    def test_deterministic(self):
        snapshot = seed_snapshot(TODAY)
        assert derive_dashboard(snapshot, TODAY) == derive_dashboard(snapshot, TODAY)

    def test_recent_attendance_limit(self):
        workers = (make_worker("w1"),)
        attendance = tuple(make_attendance(f"a{i}", "w1", LabourStatus.PRESENT) for i in range(10))
        snapshot = WorkspaceSnapshot((make_contractor(),), workers, attendance, (), "c1")
        view = derive_dashboard(snapshot, TODAY)
        assert [r.id for r in view.recent_attendance] == [f"a{i}" for i in range(6)]
        view = derive_dashboard(snapshot, TODAY, DerivationPolicy(recent_attendance_limit=2))
        assert len(view.recent_attendance) == 2
