"""
Seed Data Module

The fixed starting roster loaded at session start. Dates are placed
relative to the session's `today`.
"""

from datetime import date, timedelta
from typing import Tuple

from infrastructure.date_utils import add_months

from .entities import (
    AttendanceRecord, Contractor, LabourStatus, Payment, PaymentCategory,
    Worker, WorkspaceSnapshot
)


def seed_contractors(today: date) -> Tuple[Contractor, ...]:
    month_start = today.replace(day=1)
    next_month = add_months(today, 1)
    return (
        Contractor(
            id="c1",
            name="Skyline Mechanical",
            company="Skyline Mechanical",
            scope="High-rise plumbing installation & QA",
            budget=180000,
            start_date=month_start,
            # Last day of next month
            end_date=add_months(today, 2) - timedelta(days=1),
            crew_size_target=12,
            notes="Key milestone: pressure test every Wednesday.",
        ),
        Contractor(
            id="c2",
            name="BlueWave Piping",
            company="BlueWave Piping",
            scope="Basement drainage rerouting",
            budget=95000,
            start_date=month_start.replace(day=5),
            end_date=next_month.replace(day=20),
            crew_size_target=8,
            notes="Coordinate with civil to avoid conduit clashes.",
        ),
    )


def seed_workers() -> Tuple[Worker, ...]:
    return (
        Worker(id="w1", name="Priya Sharma", trade="Pipe Fitter", daily_rate=4200,
               status=LabourStatus.PRESENT, contractor_id="c1", phone="+91 98765 43210"),
        Worker(id="w2", name="Akash Patel", trade="Welder", daily_rate=4600,
               status=LabourStatus.PRESENT, contractor_id="c1", phone="+91 93210 76543"),
        Worker(id="w3", name="Michael Lopez", trade="Foreman", daily_rate=5800,
               status=LabourStatus.LEAVE, contractor_id="c2", phone="+1 415-555-2010"),
        Worker(id="w4", name="Lily Chen", trade="Assistant", daily_rate=3600,
               status=LabourStatus.STANDBY, contractor_id="c2"),
    )


def seed_attendance(today: date) -> Tuple[AttendanceRecord, ...]:
    return (
        AttendanceRecord(id="a1", worker_id="w1", date=today, hours_worked=8,
                         presence=LabourStatus.PRESENT, site="Tower B level 21",
                         remarks="Stack 12 inspection passed"),
        AttendanceRecord(id="a2", worker_id="w2", date=today, hours_worked=7.5,
                         presence=LabourStatus.PRESENT, site="Tower B roof",
                         remarks="Pressure test follow-up"),
        AttendanceRecord(id="a3", worker_id="w3", date=today, hours_worked=0,
                         presence=LabourStatus.LEAVE, site="Basement shaft",
                         remarks="Family emergency"),
    )


def seed_payments(today: date) -> Tuple[Payment, ...]:
    return (
        Payment(id="p1", worker_id="w1", amount=12000, date=today - timedelta(days=2),
                category=PaymentCategory.ADVANCE, note="Rotation bonus"),
        Payment(id="p2", worker_id="w2", amount=18000, date=today - timedelta(days=7),
                category=PaymentCategory.MATERIAL, note="Gas cylinder procurement"),
    )


def seed_snapshot(today: date) -> WorkspaceSnapshot:
    """Full starting state; the first contractor is selected."""
    contractors = seed_contractors(today)
    return WorkspaceSnapshot(
        contractors=contractors,
        workers=seed_workers(),
        attendance=seed_attendance(today),
        payments=seed_payments(today),
        selected_contractor_id=contractors[0].id if contractors else None,
    )
