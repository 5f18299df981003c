"""
PDF Writer Module

Generates the printable coordination brief using fpdf2: headline metrics,
risk flags, agenda and the three coordination prompts.
"""

import sys
from datetime import date
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from fpdf import FPDF

from domain.briefs import CoordinationBrief, format_money
from domain.derivation import DashboardView
from infrastructure.logger import get_logger

logger = get_logger("PdfWriter")


# ==============================================================================
# Font Configuration
# ==============================================================================
WINDOWS_FONT_PATHS: List[Path] = [
    Path("C:/Windows/Fonts/Nirmala.ttf"),    # Nirmala UI (has the rupee sign)
    Path("C:/Windows/Fonts/arialuni.ttf"),
    Path("C:/Windows/Fonts/segoeui.ttf"),
]

MACOS_FONT_PATHS: List[Path] = [
    Path("/Library/Fonts/Arial Unicode.ttf"),
    Path("/System/Library/Fonts/Supplemental/Arial Unicode.ttf"),
]

LINUX_FONT_PATHS: List[Path] = [
    Path("/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/dejavu/DejaVuSans.ttf"),
    Path("/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf"),
]

FALLBACK_FONT = "Helvetica"

# Core PDF fonts only cover Latin-1
_LATIN1_REPLACEMENTS = {
    "₹": "Rs.",
    "–": "-",
    "—": "-",
    "·": "-",
    "’": "'",
}


def find_unicode_font(custom_font_path: Optional[str] = None) -> Optional[Path]:
    """Search for a Unicode TTF font, custom path first, then platform paths."""
    if custom_font_path:
        custom_path = Path(custom_font_path)
        if custom_path.exists():
            logger.info(f"Using custom font: {custom_path}")
            return custom_path
        else:
            logger.warning(f"Custom font path does not exist: {custom_path}")

    for font_path in _get_platform_fonts():
        if font_path.exists():
            logger.debug(f"Found system font: {font_path}")
            return font_path

    return None


def _get_platform_fonts() -> List[Path]:
    """Get the font search list for the current platform."""
    if sys.platform == 'win32':
        return WINDOWS_FONT_PATHS
    elif sys.platform == 'darwin':
        return MACOS_FONT_PATHS
    else:
        return LINUX_FONT_PATHS


def to_latin1(text: str) -> str:
    """Transliterate text for the core fonts; unknown characters become '?'."""
    for source, target in _LATIN1_REPLACEMENTS.items():
        text = text.replace(source, target)
    return text.encode("latin-1", "replace").decode("latin-1")


def format_filename(pattern: str, day: date) -> str:
    """Format filename pattern with {date}, {year} and {month} placeholders."""
    return pattern.format(
        date=day.isoformat(),
        year=day.year,
        month=f"{day.month:02d}"
    )


# ==============================================================================
# BriefPdf Class (A4 Portrait)
# ==============================================================================
class BriefPdf(FPDF):
    """
    FPDF subclass with Unicode font support for the A4 coordination brief.
    """

    _font_family: str = FALLBACK_FONT
    _font_loaded: bool = False

    def __init__(self, title: str = "", custom_font_path: Optional[str] = None):
        super().__init__(orientation='P', unit='mm', format='A4')
        self.title_text = title
        self._setup_unicode_font(custom_font_path)

    def _setup_unicode_font(self, custom_font_path: Optional[str] = None) -> None:
        """Load a Unicode font if available."""
        font_path = find_unicode_font(custom_font_path)

        if font_path:
            try:
                self.add_font("BriefFont", "", str(font_path))
                self._font_family = "BriefFont"
                self._font_loaded = True
                logger.info(f"Loaded Unicode font: {font_path.name}")
            except Exception as e:
                logger.warning(f"Could not load font {font_path}: {e}")
                self._font_family = FALLBACK_FONT
                self._font_loaded = False
        else:
            logger.warning("No Unicode font found, falling back to Latin-1 text.")
            self._font_family = FALLBACK_FONT
            self._font_loaded = False

    @property
    def font_family_name(self) -> str:
        return self._font_family

    @property
    def unicode_enabled(self) -> bool:
        return self._font_loaded

    def text_for(self, text: str) -> str:
        """Text as it can be rendered with the active font."""
        return text if self._font_loaded else to_latin1(text)

    def header(self) -> None:
        """Draw page header with centered title."""
        self.set_font(self._font_family, '', 14)
        self.cell(0, 10, self.text_for(self.title_text), align='C', new_x='LMARGIN', new_y='NEXT')
        self.ln(3)

    def footer(self) -> None:
        """Draw page footer with page number."""
        self.set_y(-12)
        self.set_font(self._font_family, '', 8)
        self.cell(0, 10, f'Page {self.page_no()}/{{nb}}', align='C')


# ==============================================================================
# PdfWriter Class
# ==============================================================================
class PdfWriter:
    """
    Generates the coordination brief PDF.

    Layout:
    - Contractor block (budget, schedule, crew target)
    - Metric table (payroll, crew pulse, availability, payouts)
    - Risk flags and agenda
    - The coordination prompts, one block each
    """

    COLORS: Dict[str, Tuple[int, int, int]] = {
        'header': (68, 114, 196),
        'risk': (255, 107, 107),
        'muted': (90, 90, 90),
        'white': (255, 255, 255),
        'black': (0, 0, 0),
    }

    LABEL_COL_WIDTH = 70
    ROW_HEIGHT = 7
    LINE_HEIGHT = 5.5

    def __init__(
        self,
        currency_symbol: str = "₹",
        custom_font_path: Optional[str] = None
    ):
        self._currency_symbol = currency_symbol
        self._custom_font_path = custom_font_path

    def create_brief(
        self,
        view: DashboardView,
        briefs: Sequence[CoordinationBrief],
        report_date: date,
        output_path: Path
    ) -> Path:
        """
        Create the coordination brief PDF.

        Args:
            view: Derived dashboard for the crew in scope
            briefs: Coordination prompts to include
            report_date: Date printed in the title
            output_path: Path to save the PDF

        Returns:
            Path to the created file
        """
        title = f"Site Coordination Brief - {report_date.isoformat()}"
        pdf = BriefPdf(title=title, custom_font_path=self._custom_font_path)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=15)
        pdf.add_page()

        self._draw_contractor(pdf, view)
        self._draw_metrics(pdf, view)
        self._draw_list(pdf, "Key risks", list(view.risk_flags) or ["No active risks"], self.COLORS['risk'])
        self._draw_list(
            pdf, "Agenda",
            [f"{a.title} ({a.category}): {a.detail}" for a in view.actions],
            self.COLORS['header']
        )
        for brief in briefs:
            self._draw_brief(pdf, brief)

        output_path.parent.mkdir(parents=True, exist_ok=True)
        pdf.output(str(output_path))
        logger.info(f"PDF brief saved: {output_path}")
        return output_path

    def _money(self, amount: float) -> str:
        return format_money(amount, self._currency_symbol)

    def _section_title(self, pdf: BriefPdf, title: str) -> None:
        pdf.ln(2)
        pdf.set_font(pdf.font_family_name, '', 12)
        pdf.set_text_color(*self.COLORS['header'])
        pdf.cell(0, 8, pdf.text_for(title), new_x='LMARGIN', new_y='NEXT')
        pdf.set_text_color(*self.COLORS['black'])

    def _draw_contractor(self, pdf: BriefPdf, view: DashboardView) -> None:
        contractor = view.contractor
        pdf.set_font(pdf.font_family_name, '', 11)
        if contractor is None:
            pdf.cell(0, self.ROW_HEIGHT, "Focus: all contractors", new_x='LMARGIN', new_y='NEXT')
            return
        lines = [
            f"Focus: {contractor.name} ({contractor.company})",
            f"Scope: {contractor.scope}",
            f"Budget: {self._money(contractor.budget)}",
            f"Schedule: {contractor.start_date.isoformat()} - {contractor.end_date.isoformat()}",
            f"Crew target: {contractor.crew_size_target}",
        ]
        if contractor.notes:
            lines.append(f"Notes: {contractor.notes}")
        for line in lines:
            pdf.multi_cell(0, self.LINE_HEIGHT, pdf.text_for(line), new_x='LMARGIN', new_y='NEXT')

    def _draw_metrics(self, pdf: BriefPdf, view: DashboardView) -> None:
        totals = view.totals
        rows = [
            ("Expected Payroll (Today)", self._money(totals.daily_spend)),
            ("Crew Pulse", f"{totals.present_count} present, {totals.off_count} off-site or on leave"),
            ("Crew Availability", f"{totals.crew_health_pct}% of target"),
            ("Payouts", self._money(totals.total_payments)),
        ]
        self._section_title(pdf, "Metrics")
        pdf.set_font(pdf.font_family_name, '', 10)
        for label, value in rows:
            pdf.set_fill_color(*self.COLORS['header'])
            pdf.set_text_color(*self.COLORS['white'])
            pdf.cell(self.LABEL_COL_WIDTH, self.ROW_HEIGHT, pdf.text_for(label), border=1, fill=True)
            pdf.set_text_color(*self.COLORS['black'])
            pdf.cell(0, self.ROW_HEIGHT, pdf.text_for(value), border=1, new_x='LMARGIN', new_y='NEXT')

    def _draw_list(
        self,
        pdf: BriefPdf,
        title: str,
        items: Sequence[str],
        bullet_color: Tuple[int, int, int]
    ) -> None:
        self._section_title(pdf, title)
        pdf.set_font(pdf.font_family_name, '', 10)
        for item in items:
            pdf.set_text_color(*bullet_color)
            pdf.cell(5, self.LINE_HEIGHT, "-")
            pdf.set_text_color(*self.COLORS['black'])
            pdf.multi_cell(0, self.LINE_HEIGHT, pdf.text_for(item), new_x='LMARGIN', new_y='NEXT')

    def _draw_brief(self, pdf: BriefPdf, brief: CoordinationBrief) -> None:
        self._section_title(pdf, brief.title)
        pdf.set_font(pdf.font_family_name, '', 10)
        pdf.set_text_color(*self.COLORS['muted'])
        pdf.multi_cell(0, self.LINE_HEIGHT, pdf.text_for(brief.prompt), border=1, new_x='LMARGIN', new_y='NEXT')
        pdf.set_text_color(*self.COLORS['black'])
