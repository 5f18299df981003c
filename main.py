"""
Site Crew Dashboard

Command-line front end for the contractor and labour dashboard:
prints crew metrics, risk flags, agenda and coordination briefs for a
seeded workspace, and optionally exports them to Excel/PDF.
"""

import argparse
import sys
from pathlib import Path

# Add src directory to path for imports
sys.path.insert(0, str(Path(__file__).parent / "src"))

from application.dashboard_service import DashboardService
from application.workspace_store import WorkspaceStore
from config.config_manager import ConfigManager
from domain.briefs import format_money
from infrastructure.date_utils import format_short


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Contractor & Labour Control Centre")
    parser.add_argument(
        "--contractor",
        help="Contractor id to focus on ('all' for every crew); defaults to the first contractor",
    )
    parser.add_argument("--export", type=Path, help="Directory to export the workbook and PDF brief to")
    parser.add_argument("--config", type=Path, help="Path to a JSON config file")
    return parser


def print_dashboard(service: DashboardService) -> None:
    view = service.current_view()
    symbol = service.config.display.currency_symbol
    totals = view.totals
    names = {w.id: w.name for w in view.crew}

    print(f"Focus: {view.contractor.name if view.contractor else 'All contractors'}")
    print(f"  Expected payroll (today): {format_money(totals.daily_spend, symbol)}")
    print(f"  Crew pulse: {totals.present_count} present, {totals.off_count} off-site or on leave")
    print(f"  Crew availability: {totals.crew_health_pct}% of target")
    print(f"  Payouts: {format_money(totals.total_payments, symbol)}")

    print("Key risks:")
    for flag in view.risk_flags or ("No active risks",):
        print(f"  - {flag}")

    print("Agenda:")
    for action in view.actions:
        print(f"  [{action.category}] {action.title}: {action.detail}")

    print("Recent attendance:")
    for record in view.recent_attendance:
        remarks = f" - {record.remarks[:36]}" if record.remarks else ""
        print(
            f"  {names.get(record.worker_id, 'Worker')} @ {record.site} "
            f"{format_short(record.date)} {record.presence.label} {record.hours_worked} hrs{remarks}"
        )

    print("Briefs:")
    for brief in service.briefs(view):
        print(f"  {brief.title}: {brief.prompt}")


def main(argv=None):
    """Application entry point."""
    args = build_parser().parse_args(argv)

    config_manager = ConfigManager(args.config) if args.config else ConfigManager()
    config = config_manager.load()

    store = WorkspaceStore.with_seed_data()
    if args.contractor:
        store.set_selected_contractor(None if args.contractor == "all" else args.contractor)

    service = DashboardService(store, config)
    print_dashboard(service)

    if args.export:
        params = DashboardService.build_params_from_config(config, service.clock(), args.export)
        result = service.export_report(params)
        print(f"Exported: {result.excel_path}" + (f", {result.pdf_path}" if result.pdf_path else ""))


if __name__ == "__main__":
    main()
