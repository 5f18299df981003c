"""
Workspace Store Module

The single authoritative holder of contractors, workers, attendance and
payments, plus the selected-contractor cursor.

State lives in tuples of frozen records. Each mutation builds the new
tuple and swaps it in with one assignment before observers are told,
so a subscriber only ever sees complete transitions.
"""

from dataclasses import asdict, replace
from datetime import date
from enum import Enum, auto
from typing import Callable, Iterable, List, Optional, Set, Tuple

from domain.entities import (
    AttendanceDraft, AttendanceRecord, Contractor, LabourStatus, Payment,
    PaymentDraft, Worker, WorkerDraft, WorkspaceSnapshot
)
from domain.seed import seed_snapshot
from infrastructure.id_generator import IdFactory, uuid_id
from infrastructure.logger import get_logger

logger = get_logger("WorkspaceStore")

Observer = Callable[[WorkspaceSnapshot], None]


class MutationResult(Enum):
    """Outcome of an update addressed by id."""
    OK = auto()
    NOT_FOUND = auto()

    def __bool__(self) -> bool:
        return self is MutationResult.OK


class WorkspaceStore:
    """
    Observable in-memory store for one dashboard session.

    Construct one per session and pass it to whoever needs it; there is
    no module-level instance. All writes go through the mutation methods.
    """

    def __init__(
        self,
        contractors: Iterable[Contractor] = (),
        workers: Iterable[Worker] = (),
        attendance: Iterable[AttendanceRecord] = (),
        payments: Iterable[Payment] = (),
        selected_contractor_id: Optional[str] = None,
        id_factory: IdFactory = uuid_id
    ):
        self._contractors: Tuple[Contractor, ...] = tuple(contractors)
        self._workers: Tuple[Worker, ...] = tuple(workers)
        self._attendance: Tuple[AttendanceRecord, ...] = tuple(attendance)
        self._payments: Tuple[Payment, ...] = tuple(payments)
        self._selected_contractor_id = selected_contractor_id
        self._id_factory = id_factory
        self._observers: List[Observer] = []
        self._issued_ids: Set[str] = {
            item.id
            for collection in (self._contractors, self._workers, self._attendance, self._payments)
            for item in collection
        }

    @classmethod
    def from_snapshot(
        cls,
        snapshot: WorkspaceSnapshot,
        id_factory: IdFactory = uuid_id
    ) -> "WorkspaceStore":
        return cls(
            contractors=snapshot.contractors,
            workers=snapshot.workers,
            attendance=snapshot.attendance,
            payments=snapshot.payments,
            selected_contractor_id=snapshot.selected_contractor_id,
            id_factory=id_factory,
        )

    @classmethod
    def with_seed_data(
        cls,
        today: Optional[date] = None,
        id_factory: IdFactory = uuid_id
    ) -> "WorkspaceStore":
        """Build a store holding the standard starting roster."""
        store = cls.from_snapshot(seed_snapshot(today or date.today()), id_factory)
        logger.info(
            f"Workspace seeded: {len(store.contractors)} contractors, "
            f"{len(store.workers)} workers"
        )
        return store

    # ------------------------------------------------------------------
    # Read accessors
    # ------------------------------------------------------------------

    @property
    def contractors(self) -> Tuple[Contractor, ...]:
        return self._contractors

    @property
    def workers(self) -> Tuple[Worker, ...]:
        return self._workers

    @property
    def attendance(self) -> Tuple[AttendanceRecord, ...]:
        return self._attendance

    @property
    def payments(self) -> Tuple[Payment, ...]:
        return self._payments

    @property
    def selected_contractor_id(self) -> Optional[str]:
        return self._selected_contractor_id

    @property
    def selected_contractor(self) -> Optional[Contractor]:
        if self._selected_contractor_id is None:
            return None
        return self.find_contractor(self._selected_contractor_id)

    def find_contractor(self, contractor_id: str) -> Optional[Contractor]:
        return next((c for c in self._contractors if c.id == contractor_id), None)

    def find_worker(self, worker_id: str) -> Optional[Worker]:
        return next((w for w in self._workers if w.id == worker_id), None)

    def snapshot(self) -> WorkspaceSnapshot:
        """Current state as an immutable snapshot."""
        return WorkspaceSnapshot(
            contractors=self._contractors,
            workers=self._workers,
            attendance=self._attendance,
            payments=self._payments,
            selected_contractor_id=self._selected_contractor_id,
        )

    # ------------------------------------------------------------------
    # Subscription
    # ------------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """
        Register a callback invoked with the new snapshot after every state change.

        Returns:
            A function that unregisters the callback
        """
        self._observers.append(observer)
        return lambda: self.unsubscribe(observer)

    def unsubscribe(self, observer: Observer) -> None:
        if observer in self._observers:
            self._observers.remove(observer)

    def _notify(self) -> None:
        snapshot = self.snapshot()
        # Copy so an observer may unsubscribe while being notified
        for observer in list(self._observers):
            observer(snapshot)

    def _next_id(self) -> str:
        new_id = self._id_factory()
        while new_id in self._issued_ids:
            new_id = self._id_factory()
        self._issued_ids.add(new_id)
        return new_id

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_selected_contractor(self, contractor_id: Optional[str]) -> None:
        """Move the selection cursor. No existence check is made."""
        if contractor_id == self._selected_contractor_id:
            return
        self._selected_contractor_id = contractor_id
        logger.debug(f"Selected contractor: {contractor_id}")
        self._notify()

    def add_attendance(self, draft: AttendanceDraft) -> AttendanceRecord:
        """Log attendance, newest first. The worker id is not checked."""
        record = AttendanceRecord(id=self._next_id(), **asdict(draft))
        self._attendance = (record,) + self._attendance
        logger.debug(f"Attendance {record.id} added for worker {record.worker_id}")
        self._notify()
        return record

    def update_attendance_presence(
        self,
        record_id: str,
        presence: LabourStatus
    ) -> MutationResult:
        """Change the presence of a logged entry. The worker's status is untouched."""
        for index, record in enumerate(self._attendance):
            if record.id == record_id:
                if record.presence == presence:
                    return MutationResult.OK
                updated = replace(record, presence=presence)
                self._attendance = (
                    self._attendance[:index] + (updated,) + self._attendance[index + 1:]
                )
                logger.debug(f"Attendance {record_id} presence -> {presence.value}")
                self._notify()
                return MutationResult.OK
        logger.warning(f"Attendance record not found: {record_id}")
        return MutationResult.NOT_FOUND

    def add_payment(self, draft: PaymentDraft) -> Payment:
        """Log a payment, newest first. The worker id is not checked."""
        payment = Payment(id=self._next_id(), **asdict(draft))
        self._payments = (payment,) + self._payments
        logger.debug(
            f"Payment {payment.id} added: {payment.category.value} {payment.amount} "
            f"for worker {payment.worker_id}"
        )
        self._notify()
        return payment

    def update_worker_status(
        self,
        worker_id: str,
        status: LabourStatus
    ) -> MutationResult:
        for index, worker in enumerate(self._workers):
            if worker.id == worker_id:
                if worker.status == status:
                    return MutationResult.OK
                updated = replace(worker, status=status)
                self._workers = self._workers[:index] + (updated,) + self._workers[index + 1:]
                logger.debug(f"Worker {worker_id} status -> {status.value}")
                self._notify()
                return MutationResult.OK
        logger.warning(f"Worker not found: {worker_id}")
        return MutationResult.NOT_FOUND

    def add_worker(self, draft: WorkerDraft) -> Worker:
        """Add a worker at the end of the roster."""
        worker = Worker(id=self._next_id(), **asdict(draft))
        self._workers = self._workers + (worker,)
        logger.info(f"Worker added: {worker.name} ({worker.trade}) -> {worker.contractor_id}")
        self._notify()
        return worker
