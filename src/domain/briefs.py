"""
Coordination Briefs Module

Plain-text prompts for the daily coordination round: one for the
contractor, one for the labour captain and one for the supplier.
Pure string templating over a DashboardView.
"""

from dataclasses import dataclass
from typing import List

from .derivation import DashboardView

OVERTIME_CEILING_FACTOR = 1.3


@dataclass(frozen=True)
class CoordinationBrief:
    title: str
    prompt: str


def format_money(amount: float, currency_symbol: str = "₹") -> str:
    """
    Format an amount rounded to whole units with Indian digit grouping.

    Examples:
        180000 -> ₹1,80,000
        4200 -> ₹4,200
    """
    value = int(round(amount))
    sign = "-" if value < 0 else ""
    digits = str(abs(value))
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ",".join(groups + [tail])
    return f"{sign}{currency_symbol}{digits}"


def build_coordination_briefs(
    view: DashboardView,
    currency_symbol: str = "₹"
) -> List[CoordinationBrief]:
    """Build the three briefs in display order."""
    contractor_name = view.contractor.name if view.contractor else "contractor"
    scope = view.contractor.scope if view.contractor else "scope"
    totals = view.totals
    risks = "; ".join(view.risk_flags) or "none"

    return [
        CoordinationBrief(
            title="Contractor Update",
            prompt=(
                f"Summarise today's plumbing site update for {contractor_name}, "
                f"highlight {totals.present_count} present crew, list risks: {risks}, "
                f"and request approvals for payouts totalling "
                f"{format_money(totals.total_payments, currency_symbol)}."
            ),
        ),
        CoordinationBrief(
            title="Labour Captain Brief",
            prompt=(
                f"Coach labour captain on redeployment needs. Mention standby crew "
                f"count {view.standby_count}, ensure all absent members log reasons, "
                f"and remind about safety checks before hydro tests."
            ),
        ),
        CoordinationBrief(
            title="Supplier Coordination",
            prompt=(
                f"Draft message to supplier for materials linked to {scope}, "
                f"schedule deliveries aligned with crew availability "
                f"({totals.present_count}/{len(view.crew)}) and prevent overtime spend "
                f"beyond {format_money(totals.daily_spend * OVERTIME_CEILING_FACTOR, currency_symbol)}."
            ),
        ),
    ]
