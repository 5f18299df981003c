"""
Domain Entities Module

Core domain entities using dataclasses for the site crew dashboard.
These entities represent the core business concepts independent of infrastructure.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class LabourStatus(Enum):
    """Presence status of a worker (or of a single attendance entry)."""
    PRESENT = "present"
    ABSENT = "absent"
    LEAVE = "leave"
    STANDBY = "standby"

    @property
    def label(self) -> str:
        return _STATUS_LABELS[self]


_STATUS_LABELS = {
    LabourStatus.PRESENT: "Present",
    LabourStatus.ABSENT: "Absent",
    LabourStatus.LEAVE: "On Leave",
    LabourStatus.STANDBY: "Standby",
}


class PaymentCategory(Enum):
    """Kind of payout issued to a worker."""
    ADVANCE = "advance"
    MATERIAL = "material"
    BONUS = "bonus"
    DEDUCTION = "deduction"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class Contractor:
    """
    A contractor engaged on the site.

    Attributes:
        id: Store-assigned identifier
        name: Display name
        company: Company name
        scope: Work scope description (also used as default site label)
        budget: Total contract budget
        start_date: Contract start
        end_date: Contract end (used for budget exposure projection)
        crew_size_target: Planned headcount
        notes: Optional free text
    """
    id: str
    name: str
    company: str
    scope: str
    budget: float
    start_date: date
    end_date: date
    crew_size_target: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class Worker:
    """
    A labourer on a contractor's crew.

    `status` is today's presence and drives the payroll projection.
    `contractor_id` is not enforced; dangling references are filtered out.
    """
    id: str
    name: str
    trade: str
    daily_rate: float
    status: LabourStatus
    contractor_id: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class AttendanceRecord:
    """A single attendance log entry for a worker."""
    id: str
    worker_id: str
    date: date
    hours_worked: float
    presence: LabourStatus
    site: str
    remarks: Optional[str] = None


@dataclass(frozen=True)
class Payment:
    """A payout (or deduction) logged against a worker."""
    id: str
    worker_id: str
    amount: float
    date: date
    category: PaymentCategory
    note: Optional[str] = None


# Creation payloads: every field of the entity except `id`,
# which the store assigns.

@dataclass(frozen=True)
class WorkerDraft:
    name: str
    trade: str
    daily_rate: float
    status: LabourStatus
    contractor_id: str
    phone: Optional[str] = None


@dataclass(frozen=True)
class AttendanceDraft:
    worker_id: str
    date: date
    hours_worked: float
    presence: LabourStatus
    site: str
    remarks: Optional[str] = None


@dataclass(frozen=True)
class PaymentDraft:
    worker_id: str
    amount: float
    date: date
    category: PaymentCategory
    note: Optional[str] = None


@dataclass(frozen=True)
class WorkspaceSnapshot:
    """
    Read-only view of the store at one point in time.

    Attributes:
        contractors: All contractors, in insertion order
        workers: All workers, in insertion order
        attendance: Attendance log, newest first
        payments: Payment log, newest first
        selected_contractor_id: Current selection cursor (may be None)
    """
    contractors: Tuple[Contractor, ...] = field(default_factory=tuple)
    workers: Tuple[Worker, ...] = field(default_factory=tuple)
    attendance: Tuple[AttendanceRecord, ...] = field(default_factory=tuple)
    payments: Tuple[Payment, ...] = field(default_factory=tuple)
    selected_contractor_id: Optional[str] = None
