"""
Unit tests for coordination brief templating and money formatting.
"""

from datetime import date
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from domain.briefs import build_coordination_briefs, format_money
from domain.derivation import derive_dashboard
from domain.entities import WorkspaceSnapshot
from domain.seed import seed_snapshot

TODAY = date(2025, 3, 12)


class TestFormatMoney:
    """Tests for Indian-grouped money formatting."""

    def test_small_amounts(self):
        assert format_money(0) == "₹0"
        assert format_money(999) == "₹999"

    def test_thousands(self):
        assert format_money(4200) == "₹4,200"

    def test_lakhs_and_crores(self):
        assert format_money(180000) == "₹1,80,000"
        assert format_money(12345678) == "₹1,23,45,678"

    def test_rounds_to_whole_units(self):
        assert format_money(11440.4) == "₹11,440"

    def test_negative_and_custom_symbol(self):
        assert format_money(-2500, "Rs. ") == "-Rs. 2,500"


class TestCoordinationBriefs:
    """Tests for the three brief prompts."""

    def test_titles_in_order(self):
        view = derive_dashboard(seed_snapshot(TODAY), TODAY)
        titles = [b.title for b in build_coordination_briefs(view)]
        assert titles == ["Contractor Update", "Labour Captain Brief", "Supplier Coordination"]

    def test_contractor_update_contents(self):
        view = derive_dashboard(seed_snapshot(TODAY), TODAY)
        prompt = build_coordination_briefs(view)[0].prompt
        assert "Skyline Mechanical" in prompt
        assert "highlight 2 present crew" in prompt
        assert "Budget exposure: tighten purchase approvals." in prompt
        assert prompt.endswith("payouts totalling ₹30,000.")

    def test_supplier_overtime_ceiling(self):
        view = derive_dashboard(seed_snapshot(TODAY), TODAY)
        prompt = build_coordination_briefs(view)[2].prompt
        # 8800 * 1.3 = 11440
        assert "High-rise plumbing installation & QA" in prompt
        assert "(2/2)" in prompt
        assert prompt.endswith("beyond ₹11,440.")

    def test_no_contractor_and_no_risks(self):
        view = derive_dashboard(WorkspaceSnapshot(), TODAY)
        briefs = build_coordination_briefs(view)
        assert "update for contractor," in briefs[0].prompt
        assert "list risks: none," in briefs[0].prompt
        assert "standby crew count 0" in briefs[1].prompt
        assert "linked to scope," in briefs[2].prompt
