"""
PDF Quote Generator.

Renders a QuoteOutput dict (exactly as produced by the pricing pipeline) into
a printable quote. Uses fpdf2 (pure Python, no system dependencies).

Sections:
1. Header + project meta
2. Development (crew)
3. Production (gear)
4. Summary: base costs, multipliers, contingency, grand total,
   and client price / nett profit only when a margin was configured
"""

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from fpdf import FPDF

from .config import settings


def _fmt(amount) -> str:
    """Format as Indonesian Rupiah: Rp 1.850.000 (no decimals)."""
    try:
        whole = Decimal(str(float(amount))).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    except (ValueError, TypeError, ArithmeticError):
        whole = Decimal(0)
    grouped = f"{int(whole):,}".replace(",", ".")
    return f"{settings.CURRENCY_SYMBOL} {grouped}"


def _fmt_qty(value) -> str:
    """1 -> '1', 0.5 -> '0.5'"""
    try:
        return f"{float(value):g}"
    except (ValueError, TypeError):
        return "0"


def _fmt_date(created_at) -> str:
    try:
        dt = datetime.fromisoformat(str(created_at).replace("Z", "+00:00"))
    except (ValueError, TypeError):
        dt = datetime.utcnow()
    return f"{dt.day}/{dt.month}/{dt.year}"


def _safe(text: str) -> str:
    """Replace Unicode chars that can't be rendered by built-in PDF fonts (latin-1)."""
    if not text:
        return ""
    return (
        str(text)
        .replace("\u2022", "-")    # bullet
        .replace("\u2014", " - ")  # em dash
        .replace("\u2013", "-")    # en dash
        .replace("\u201c", '"')    # left double quote
        .replace("\u201d", '"')    # right double quote
        .replace("\u2018", "'")    # left single quote
        .replace("\u2019", "'")    # right single quote
        .encode("latin-1", errors="replace")
        .decode("latin-1")
    )


class QuotePDF(FPDF):
    """Custom PDF class for quote documents."""

    def __init__(self, studio_name="", studio_info=""):
        super().__init__()
        self.studio_name = studio_name
        self.studio_info = studio_info
        self.set_auto_page_break(auto=True, margin=20)

    def header(self):
        pass  # Header is drawn once on the first page

    def footer(self):
        self.set_y(-15)
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(150, 150, 150)
        self.cell(0, 10, f"Page {self.page_no()}/{{nb}}", align="C")

    def section_header(self, title):
        self.set_font("Helvetica", "B", 11)
        self.set_fill_color(17, 24, 39)
        self.set_text_color(255, 255, 255)
        self.cell(0, 8, f"  {title}", fill=True, new_x="LMARGIN", new_y="NEXT")
        self.set_text_color(0, 0, 0)
        self.ln(2)

    def table_header(self, cols):
        """cols: [(label, width), ...]"""
        self.set_font("Helvetica", "B", 8)
        self.set_fill_color(243, 244, 246)
        for label, width in cols:
            align = "L" if label in ("Role", "Item") else "R"
            self.cell(width, 6, label, border="B", fill=True, align=align)
        self.ln()

    def table_row(self, values, widths):
        self.set_font("Helvetica", "", 8)
        for i, (val, width) in enumerate(zip(values, widths)):
            self.cell(width, 5.5, str(val), align="L" if i == 0 else "R")
        self.ln()

    def empty_row(self, text, width):
        self.set_font("Helvetica", "I", 8)
        self.set_text_color(120, 120, 120)
        self.cell(width, 5.5, text)
        self.set_text_color(0, 0, 0)
        self.ln()

    def summary_row(self, label, value, bold=False):
        self.set_font("Helvetica", "B" if bold else "", 11 if bold else 10)
        self.cell(130, 7 if bold else 6, label)
        self.cell(60, 7 if bold else 6, value, align="R")
        self.ln()


LINE_COLUMNS = [(None, 70), ("Qty", 20), ("Days", 20), ("Rate / Day", 40), ("Line Total", 40)]


def _line_table(pdf: QuotePDF, first_label: str, lines: list, key: str, empty_text: str):
    cols = [(first_label if label is None else label, width) for label, width in LINE_COLUMNS]
    widths = [w for _, w in cols]
    pdf.table_header(cols)
    if not lines:
        pdf.empty_row(empty_text, sum(widths))
    for line in lines:
        pdf.table_row(
            [
                _safe(str(line.get(key, ""))[:40]),
                _fmt_qty(line.get("qty", 0)),
                _fmt_qty(line.get("days", 0)),
                _fmt(line.get("rate_per_day", 0)),
                _fmt(line.get("line_total", 0)),
            ],
            widths,
        )
    pdf.ln(4)


def generate_quote_pdf(quote: dict, meta: dict = None, project_label: str = None) -> bytes:
    """
    Generate a PDF quote document.

    Args:
        quote: QuoteOutput dict (QuoteOutput.to_dict() or a stored snapshot)
        meta: optional {project_title, client_name, created_at}
        project_label: display name for the project type

    Returns:
        PDF bytes
    """
    meta = meta or {}
    studio_info = " | ".join(p for p in [settings.STUDIO_EMAIL, settings.STUDIO_PHONE] if p)

    pdf = QuotePDF(studio_name=settings.STUDIO_NAME, studio_info=studio_info)
    pdf.alias_nb_pages()
    pdf.add_page()

    # ── Header ──
    pdf.set_font("Helvetica", "B", 20)
    pdf.cell(0, 10, _safe(pdf.studio_name), new_x="LMARGIN", new_y="NEXT")
    if studio_info:
        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(100, 100, 100)
        pdf.cell(0, 5, _safe(studio_info), new_x="LMARGIN", new_y="NEXT")
        pdf.set_text_color(0, 0, 0)
    pdf.ln(4)

    project_type = quote.get("project_type", "")
    label = project_label or project_type.replace("_", " ").title()

    pdf.set_font("Helvetica", "B", 14)
    pdf.cell(0, 8, "Project Quote", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(75, 85, 99)
    pdf.cell(0, 5, _safe(f"Project: {meta.get('project_title') or 'Untitled Quote'}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, _safe(f"Client: {meta.get('client_name') or '-'}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Date: {_fmt_date(meta.get('created_at'))}", new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, _safe(f"Project Type: {label}"), new_x="LMARGIN", new_y="NEXT")
    pdf.cell(0, 5, f"Valid for: {settings.QUOTE_VALID_DAYS} days", new_x="LMARGIN", new_y="NEXT")
    pdf.set_text_color(0, 0, 0)
    pdf.ln(6)

    breakdown = quote.get("breakdown", {})

    # ── Development ──
    pdf.section_header("DEVELOPMENT (CREW)")
    _line_table(pdf, "Role", breakdown.get("development", []), "role", "No crew items")

    # ── Production ──
    pdf.section_header("PRODUCTION (GEAR & OOP)")
    _line_table(pdf, "Item", breakdown.get("production", []), "name", "No gear items")

    # ── Summary ──
    pdf.section_header("SUMMARY")
    complexity = quote.get("complexity", {})
    contingency_pct = float(quote.get("contingency_pct", 0) or 0)

    pdf.summary_row("Base Crew", _fmt(quote.get("base_crew", 0)))
    pdf.summary_row("Base Gear", _fmt(quote.get("base_gear", 0)))
    pdf.summary_row("Out-of-Pocket", _fmt(quote.get("base_oop", 0)))
    pdf.summary_row("Base Cost", _fmt(quote.get("base_cost", 0)))
    pdf.summary_row("Complexity Multiplier", f"{float(complexity.get('multiplier', 1)):.2f}×")
    pdf.summary_row("Skill Multiplier", f"{float(quote.get('skill_multiplier', 1)):.2f}×")
    pdf.summary_row("Subtotal", _fmt(quote.get("subtotal", 0)))
    pdf.summary_row(f"Contingency ({contingency_pct * 100:.1f}%)", _fmt(quote.get("contingency", 0)))

    pdf.set_draw_color(229, 231, 235)
    pdf.line(pdf.l_margin, pdf.get_y(), pdf.w - pdf.r_margin, pdf.get_y())
    pdf.ln(1)
    pdf.summary_row("Grand Total", _fmt(quote.get("grand_total", 0)), bold=True)

    # Only shown when a margin was configured; absent is not zero.
    if quote.get("client_price") is not None:
        pdf.summary_row("Client Price", _fmt(quote["client_price"]))
    if quote.get("nett_profit") is not None:
        pdf.summary_row("Estimated Nett Profit", _fmt(quote["nett_profit"]))

    return bytes(pdf.output())
