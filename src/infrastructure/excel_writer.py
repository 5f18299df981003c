"""
Excel Writer Module

Exports the dashboard for the selected crew to a formatted workbook:
a summary sheet plus crew, attendance and payment sheets.
"""

from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from domain.briefs import format_money
from domain.derivation import DashboardView
from domain.entities import LabourStatus, Worker


class ExcelWriter:
    """
    Generates the site dashboard workbook.

    Sheets:
    - Summary: contractor, headline metrics, risk flags, agenda
    - Crew: roster with status colour coding
    - Attendance: scoped attendance log, newest first
    - Payments: scoped payment log, newest first
    """

    COLORS = {
        'green': PatternFill(start_color='90EE90', end_color='90EE90', fill_type='solid'),
        'red': PatternFill(start_color='FF6B6B', end_color='FF6B6B', fill_type='solid'),
        'orange': PatternFill(start_color='FFA500', end_color='FFA500', fill_type='solid'),
        'yellow': PatternFill(start_color='FFD700', end_color='FFD700', fill_type='solid'),
        'header': PatternFill(start_color='4472C4', end_color='4472C4', fill_type='solid'),
    }

    STATUS_COLORS: Dict[LabourStatus, str] = {
        LabourStatus.PRESENT: 'green',
        LabourStatus.ABSENT: 'red',
        LabourStatus.LEAVE: 'orange',
        LabourStatus.STANDBY: 'yellow',
    }

    BORDER = Border(
        left=Side(style='thin'),
        right=Side(style='thin'),
        top=Side(style='thin'),
        bottom=Side(style='thin')
    )

    SUMMARY_SHEET = "Summary"
    CREW_SHEET = "Crew"
    ATTENDANCE_SHEET = "Attendance"
    PAYMENTS_SHEET = "Payments"

    def __init__(self, currency_symbol: str = "₹"):
        self.currency_symbol = currency_symbol
        self.wb: Optional[Workbook] = None

    def create_report(
        self,
        view: DashboardView,
        report_date: date,
        output_path: Path
    ) -> Path:
        """
        Create the dashboard workbook.

        Args:
            view: Derived dashboard for the crew in scope
            report_date: Date printed on the summary sheet
            output_path: Path to save the Excel file

        Returns:
            Path to the created file
        """
        self.wb = Workbook()
        self.wb.remove(self.wb.active)

        workers_by_id = {w.id: w for w in view.crew}

        self._write_summary(self.wb.create_sheet(self.SUMMARY_SHEET), view, report_date)
        self._write_crew(self.wb.create_sheet(self.CREW_SHEET), view.crew)
        self._write_attendance(self.wb.create_sheet(self.ATTENDANCE_SHEET), view, workers_by_id)
        self._write_payments(self.wb.create_sheet(self.PAYMENTS_SHEET), view, workers_by_id)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        self.wb.save(output_path)
        return output_path

    def _write_header(self, ws, headers: Sequence[str], row: int = 1) -> None:
        for col, title in enumerate(headers, start=1):
            cell = ws.cell(row, col, title)
            cell.font = Font(bold=True, color='FFFFFF')
            cell.fill = self.COLORS['header']
            cell.alignment = Alignment(horizontal='center', vertical='center')
            cell.border = self.BORDER

    def _write_rows(self, ws, rows: List[list], start_row: int = 2) -> None:
        for offset, values in enumerate(rows):
            for col, value in enumerate(values, start=1):
                cell = ws.cell(start_row + offset, col, value)
                cell.border = self.BORDER

    def _autosize(self, ws, min_width: int = 10, max_width: int = 60) -> None:
        for column_cells in ws.columns:
            longest = max((len(str(c.value)) for c in column_cells if c.value is not None), default=0)
            letter = get_column_letter(column_cells[0].column)
            ws.column_dimensions[letter].width = max(min_width, min(longest + 2, max_width))

    def _money(self, amount: float) -> str:
        return format_money(amount, self.currency_symbol)

    def _status_cell(self, ws, row: int, col: int, status: LabourStatus) -> None:
        cell = ws.cell(row, col, status.label)
        cell.fill = self.COLORS[self.STATUS_COLORS[status]]
        cell.alignment = Alignment(horizontal='center')
        cell.border = self.BORDER

    def _write_summary(self, ws, view: DashboardView, report_date: date) -> None:
        contractor = view.contractor
        totals = view.totals
        ws.cell(1, 1, "Contractor & Labour Control Centre").font = Font(bold=True, size=14)
        ws.cell(2, 1, "Report date")
        ws.cell(2, 2, report_date.isoformat())
        ws.cell(3, 1, "Contractor")
        ws.cell(3, 2, contractor.name if contractor else "All contractors")
        if contractor:
            ws.cell(4, 1, "Budget")
            ws.cell(4, 2, self._money(contractor.budget))
            ws.cell(5, 1, "Schedule")
            ws.cell(5, 2, f"{contractor.start_date.isoformat()} - {contractor.end_date.isoformat()}")
            ws.cell(6, 1, "Crew target")
            ws.cell(6, 2, contractor.crew_size_target)

        self._write_header(ws, ["Metric", "Value"], row=8)
        self._write_rows(ws, [
            ["Expected Payroll (Today)", self._money(totals.daily_spend)],
            ["Crew Pulse", f"{totals.present_count} present"],
            ["Off-site or on leave", totals.off_count],
            ["Crew Availability", f"{totals.crew_health_pct}% of target"],
            ["Payouts", self._money(totals.total_payments)],
        ], start_row=9)

        row = 15
        self._write_header(ws, ["Risk flags"], row=row)
        risks = [[flag] for flag in view.risk_flags] or [["No active risks"]]
        self._write_rows(ws, risks, start_row=row + 1)

        row = row + len(risks) + 2
        self._write_header(ws, ["Action", "Detail", "Category"], row=row)
        self._write_rows(
            ws,
            [[a.title, a.detail, a.category] for a in view.actions],
            start_row=row + 1
        )
        self._autosize(ws)

    def _write_crew(self, ws, crew: Sequence[Worker]) -> None:
        self._write_header(ws, ["Name", "Trade", "Daily rate", "Status", "Phone", "Contractor"])
        for row, worker in enumerate(crew, start=2):
            values = [worker.name, worker.trade, worker.daily_rate, None, worker.phone or "", worker.contractor_id]
            for col, value in enumerate(values, start=1):
                if col == 4:
                    self._status_cell(ws, row, col, worker.status)
                    continue
                ws.cell(row, col, value).border = self.BORDER
            ws.cell(row, 3).number_format = '#,##0'
        self._autosize(ws)

    def _write_attendance(self, ws, view: DashboardView, workers_by_id: Dict[str, Worker]) -> None:
        self._write_header(ws, ["Date", "Worker", "Site", "Hours", "Presence", "Remarks"])
        for row, record in enumerate(view.attendance_in_scope, start=2):
            worker = workers_by_id.get(record.worker_id)
            self._write_rows(ws, [[
                record.date.isoformat(),
                worker.name if worker else "Worker",
                record.site,
                record.hours_worked,
            ]], start_row=row)
            self._status_cell(ws, row, 5, record.presence)
            cell = ws.cell(row, 6, record.remarks or "")
            cell.border = self.BORDER
        self._autosize(ws)

    def _write_payments(self, ws, view: DashboardView, workers_by_id: Dict[str, Worker]) -> None:
        self._write_header(ws, ["Date", "Worker", "Category", "Amount", "Note"])
        rows = []
        for payment in view.payments_in_scope:
            worker = workers_by_id.get(payment.worker_id)
            rows.append([
                payment.date.isoformat(),
                worker.name if worker else "Worker",
                payment.category.label,
                payment.amount,
                payment.note or "",
            ])
        self._write_rows(ws, rows)
        for row in range(2, len(rows) + 2):
            ws.cell(row, 4).number_format = '#,##0'
        self._autosize(ws)
