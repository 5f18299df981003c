"""
Dashboard Service Module

Application layer service behind the site dashboard: derives the view
from the workspace store, runs the attendance and payment form flows,
and exports the dashboard to Excel/PDF.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Callable, List, Optional

from config.config_manager import AppConfig
from domain.briefs import CoordinationBrief, build_coordination_briefs
from domain.derivation import DashboardView, DerivationPolicy, derive_dashboard
from domain.entities import (
    AttendanceDraft, AttendanceRecord, LabourStatus, Payment, PaymentCategory,
    PaymentDraft
)
from infrastructure.logger import get_logger

from .workspace_store import MutationResult, WorkspaceStore

logger = get_logger("DashboardService")

DEFAULT_SITE = "Site"


@dataclass
class ExportParams:
    """
    Parameters for a dashboard export.

    Decouples the export from AppConfig so callers can build it directly.
    """
    excel_path: Path
    pdf_path: Optional[Path] = None
    generate_pdf: bool = True
    currency_symbol: str = "₹"
    custom_font_path: Optional[str] = None


@dataclass
class ExportResult:
    """Result of a dashboard export."""
    success: bool
    excel_path: Path
    pdf_path: Optional[Path] = None
    crew_count: int = 0
    risk_count: int = 0
    error_message: str = ""


class DashboardService:
    """
    Application service for the contractor and labour dashboard.

    This service:
    - Recomputes the dashboard from the store's latest snapshot on demand
    - Applies the form rules (required fields, defaults) before writing to the store
    - Depends only on domain, store and infrastructure, never on a UI toolkit
    """

    def __init__(
        self,
        store: WorkspaceStore,
        config: Optional[AppConfig] = None,
        clock: Callable[[], date] = date.today
    ):
        self.store = store
        self.config = config or AppConfig()
        self.clock = clock
        self._policy: DerivationPolicy = self.config.policy.to_policy()

    @property
    def policy(self) -> DerivationPolicy:
        return self._policy

    def current_view(self) -> DashboardView:
        """Derive the dashboard for the latest store state."""
        return derive_dashboard(self.store.snapshot(), self.clock(), self._policy)

    def briefs(self, view: Optional[DashboardView] = None) -> List[CoordinationBrief]:
        return build_coordination_briefs(
            view or self.current_view(),
            self.config.display.currency_symbol
        )

    def record_attendance(
        self,
        worker_id: str,
        hours_worked: float = 8,
        presence: LabourStatus = LabourStatus.PRESENT,
        remarks: Optional[str] = None,
        site: str = ""
    ) -> AttendanceRecord:
        """
        Log attendance for a worker and carry the presence onto the worker's status.

        Raises:
            ValueError: If no worker is given
        """
        if not worker_id:
            raise ValueError("A worker must be selected to log attendance")

        if not site:
            contractor = self.store.selected_contractor
            site = contractor.scope if contractor else DEFAULT_SITE

        remarks = remarks.strip() if remarks else ""
        record = self.store.add_attendance(AttendanceDraft(
            worker_id=worker_id,
            date=self.clock(),
            hours_worked=hours_worked,
            presence=presence,
            site=site,
            remarks=remarks or None,
        ))
        self.store.update_worker_status(worker_id, presence)
        logger.info(
            f"Attendance logged for {worker_id}: {presence.value}, {hours_worked} hrs at {site}"
        )
        return record

    def record_payment(
        self,
        worker_id: str,
        amount: float,
        category: PaymentCategory = PaymentCategory.ADVANCE,
        note: Optional[str] = None
    ) -> Payment:
        """
        Log a payment for a worker.

        Raises:
            ValueError: If no worker is given or the amount is zero
        """
        if not worker_id:
            raise ValueError("A worker must be selected to log a payment")
        if not amount:
            raise ValueError("Payment amount must be non-zero")

        payment = self.store.add_payment(PaymentDraft(
            worker_id=worker_id,
            amount=amount,
            date=self.clock(),
            category=category,
            note=note or None,
        ))
        logger.info(f"Payment logged for {worker_id}: {category.value} {amount}")
        return payment

    def toggle_attendance_presence(self, record_id: str) -> MutationResult:
        """Flip a logged entry between present and absent (non-present becomes present)."""
        record = next((r for r in self.store.attendance if r.id == record_id), None)
        if record is None:
            logger.warning(f"Cannot toggle unknown attendance record: {record_id}")
            return MutationResult.NOT_FOUND
        presence = (
            LabourStatus.ABSENT if record.presence == LabourStatus.PRESENT
            else LabourStatus.PRESENT
        )
        return self.store.update_attendance_presence(record_id, presence)

    def export_report(self, params: ExportParams) -> ExportResult:
        """
        Write the dashboard workbook and, if enabled, the PDF brief.

        A PDF failure is logged and reported in the result, but the Excel
        export still counts as a success.

        Raises:
            PermissionError: If the workbook cannot be written
        """
        from infrastructure.excel_writer import ExcelWriter

        today = self.clock()
        view = self.current_view()

        logger.info(f"Writing dashboard workbook: {params.excel_path}")
        ExcelWriter(params.currency_symbol).create_report(view, today, params.excel_path)
        logger.info("Workbook written")

        result = ExportResult(
            success=True,
            excel_path=params.excel_path,
            crew_count=len(view.crew),
            risk_count=len(view.risk_flags),
        )

        if params.generate_pdf and params.pdf_path is not None:
            try:
                self._generate_pdf_brief(params, view, today)
                result.pdf_path = params.pdf_path
            except Exception as e:
                logger.error(f"PDF brief generation failed: {e}")
                result.error_message = str(e)

        return result

    def _generate_pdf_brief(self, params: ExportParams, view: DashboardView, today: date) -> None:
        from infrastructure.pdf_writer import PdfWriter

        writer = PdfWriter(
            currency_symbol=params.currency_symbol,
            custom_font_path=params.custom_font_path
        )
        logger.info(f"Writing PDF brief: {params.pdf_path}")
        writer.create_brief(
            view,
            build_coordination_briefs(view, params.currency_symbol),
            today,
            params.pdf_path
        )

    @staticmethod
    def build_params_from_config(
        config: AppConfig,
        today: date,
        output_dir: Optional[Path] = None
    ) -> ExportParams:
        """
        Build ExportParams from AppConfig.

        Args:
            config: Application configuration
            today: Date used in the file name patterns
            output_dir: Overrides the configured output directory

        Returns:
            ExportParams ready for export_report()
        """
        from infrastructure.pdf_writer import format_filename

        settings = config.output_settings
        directory = output_dir or Path(settings.output_dir or ".")
        return ExportParams(
            excel_path=directory / format_filename(settings.excel_filename_pattern, today),
            pdf_path=directory / format_filename(settings.pdf_filename_pattern, today),
            generate_pdf=settings.generate_pdf,
            currency_symbol=config.display.currency_symbol,
            custom_font_path=settings.custom_font_path or None,
        )
