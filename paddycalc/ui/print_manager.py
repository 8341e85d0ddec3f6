#!/usr/bin/env python
"""Print subsystem: paints laid-out ledgers onto a single QPrinter page."""
import html
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from PyQt5.QtCore import QTimer
from PyQt5.QtGui import QFont, QPageSize, QPainter, QTextDocument
from PyQt5.QtPrintSupport import QPrintDialog, QPrinter, QPrinterInfo
from PyQt5.QtWidgets import QDialog

from paddycalc.exceptions import PrintError, PrintUnavailableError
from paddycalc.infrastructure.settings import get_app_settings
from paddycalc.services.document_renderer import DocumentLine, LineRole
from paddycalc.services.print_layout import (
    PageLayout,
    Rect,
    Size,
    available_size,
    compute_scale,
    region_rect,
)

SETTLE_DELAY_MS = 120
CSS_DPI = 96.0
REGION_PADDING = 40
REGION_MINIMUM = 200
SEPARATOR_TEXT = "-" * 32
BOLD_ROLES = {LineRole.HEADER, LineRole.AMOUNT, LineRole.FINAL}

PAGE_SIZES = {
    'A4': QPageSize.A4,
    'A5': QPageSize.A5,
    'Letter': QPageSize.Letter,
    'Legal': QPageSize.Legal,
}


def document_html(lines: Sequence[DocumentLine]) -> str:
    """Print presentation of the ledger lines: a two-column monospace table."""
    rows = []
    for line in lines:
        if line.role is LineRole.SEPARATOR:
            rows.append(f'<tr><td colspan="2">{SEPARATOR_TEXT}</td></tr>')
            continue
        left = html.escape(line.text)
        right = html.escape(line.detail)
        if line.role in BOLD_ROLES:
            left = f"<b>{left}</b>"
            right = f"<b>{right}</b>" if right else right
        rows.append(
            f'<tr class="{line.role.value}"><td>{left}</td>'
            f'<td align="right">&nbsp;&nbsp;{right}</td></tr>'
        )
    return (
        '<html><body><table cellspacing="0" cellpadding="1">'
        + "".join(rows)
        + "</table></body></html>"
    )


@dataclass
class PrintJob:
    """Detached print target kept alive until the page is painted."""

    layout: PageLayout
    finished: bool = False
    errors: List[str] = field(default_factory=list)


class PrintManager:
    """Class to handle print functionality for settlement ledgers."""

    def __init__(
        self,
        parent_widget=None,
        *,
        printer: Optional[QPrinter] = None,
        printer_names: Callable[[], Sequence[str]] = QPrinterInfo.availablePrinterNames,
        settle_delay_ms: int = SETTLE_DELAY_MS,
        logger: Optional[logging.Logger] = None,
    ):
        self.parent_widget = parent_widget
        self.logger = logger or logging.getLogger(__name__)
        self._printer_names = printer_names
        self._settle_delay_ms = settle_delay_ms
        self._active_jobs: List[PrintJob] = []

        settings = get_app_settings()
        self.output_file = settings.value("print/output_file", "", type=str) or ""
        family = settings.value("print/font_family", "Courier New", type=str) or "Courier New"
        size = settings.value("print/font_size", 10.0, type=float)
        try:
            size = max(5.0, float(size))
        except (TypeError, ValueError):
            size = 10.0
        self.print_font = QFont(family)
        self.print_font.setPointSizeF(size)
        self.printer = printer or self._configure_printer(settings)

    def _configure_printer(self, settings) -> QPrinter:
        printer = QPrinter(QPrinter.HighResolution)
        page_size_name = settings.value("print/page_size", "A4", type=str)
        printer.setPageSize(QPageSize(PAGE_SIZES.get(page_size_name, QPageSize.A4)))
        orientation_name = settings.value("print/orientation", "Portrait", type=str)
        printer.setOrientation(
            QPrinter.Landscape if orientation_name == 'Landscape' else QPrinter.Portrait
        )
        # The quadrant grid covers the physical page edge to edge.
        printer.setFullPage(True)
        printer.setPageMargins(0, 0, 0, 0, QPrinter.Millimeter)
        if self.output_file:
            printer.setOutputFormat(QPrinter.PdfFormat)
            printer.setOutputFileName(self.output_file)
        self.logger.debug(
            "Printer configured: page=%s orientation=%s output=%s",
            page_size_name,
            orientation_name,
            self.output_file or "native",
        )
        return printer

    # ------------------------------------------------------------------ #
    # Print service interface
    # ------------------------------------------------------------------ #
    def is_available(self) -> bool:
        if self.output_file:
            return True
        try:
            return bool(list(self._printer_names()))
        except Exception as exc:
            self.logger.warning("Could not query installed printers: %s", exc)
            return False

    def submit(self, layout: PageLayout) -> PrintJob:
        """Queue ``layout`` for printing after a short settle delay."""
        if not self.is_available():
            raise PrintUnavailableError("No printer is available.")
        job = PrintJob(layout=layout)
        self._active_jobs.append(job)
        QTimer.singleShot(self._settle_delay_ms, lambda: self._run_job(job))
        self.logger.info("Print job queued with %s ledger(s)", len(layout))
        return job

    @property
    def active_jobs(self) -> Sequence[PrintJob]:
        return tuple(self._active_jobs)

    def _run_job(self, job: PrintJob) -> None:
        try:
            if not self.output_file:
                dialog = QPrintDialog(self.printer, self.parent_widget)
                if dialog.exec_() != QDialog.Accepted:
                    self.logger.info("Print dialog cancelled")
                    return
            self.render_page(self.printer, job.layout)
            self.logger.info("Print job completed")
        except Exception as exc:
            job.errors.append(str(exc))
            self.logger.error("Print job failed: %s", exc, exc_info=True)
        finally:
            self._teardown(job)

    def _teardown(self, job: PrintJob) -> None:
        job.finished = True
        if job in self._active_jobs:
            self._active_jobs.remove(job)

    # ------------------------------------------------------------------ #
    # Painting
    # ------------------------------------------------------------------ #
    def build_document(self, lines: Sequence[DocumentLine], device=None, font_scale: float = 1.0) -> QTextDocument:
        """Lay out ledger lines at their natural width."""
        document = QTextDocument()
        if device is not None:
            document.documentLayout().setPaintDevice(device)
        font = QFont(self.print_font)
        font.setPointSizeF(self.print_font.pointSizeF() * font_scale)
        document.setDefaultFont(font)
        document.setDocumentMargin(0)
        document.setHtml(document_html(lines))
        document.setTextWidth(document.idealWidth())
        return document

    def render_page(self, printer: QPrinter, layout: PageLayout) -> None:
        """Paint every placed ledger into its region of one page."""
        painter = QPainter()
        if not painter.begin(printer):
            raise PrintError("Could not start painting on the print target.")
        try:
            page_rect = printer.pageRect(QPrinter.DevicePixel)
            page = Size(page_rect.width(), page_rect.height())
            unit = printer.resolution() / CSS_DPI
            for region, ledger in layout.placements():
                self._paint_ledger(
                    painter,
                    ledger.lines,
                    page,
                    region_rect(page, region),
                    full=region is None,
                    unit=unit,
                )
        finally:
            painter.end()

    def _paint_ledger(self, painter: QPainter, lines, page: Size, rect: Rect, *, full: bool, unit: float) -> None:
        device = painter.device()
        document = self.build_document(lines, device)
        padding = REGION_PADDING * unit
        available = available_size(page, full=full, padding=padding, minimum=REGION_MINIMUM * unit)
        natural = document.size()
        # Recomputed for every page: page size and settings may have changed.
        decision = compute_scale(Size(natural.width(), natural.height()), available)
        if decision.font_scale != 1.0:
            document = self.build_document(lines, device, decision.font_scale)
        self.logger.debug(
            "Painting ledger at (%.0f, %.0f) factor=%.2f font=%.2f geometry=%.2f",
            rect.x, rect.y, decision.factor, decision.font_scale, decision.geometric_scale,
        )
        painter.save()
        painter.translate(rect.x + padding / 2, rect.y + padding / 2)
        painter.scale(decision.geometric_scale, decision.geometric_scale)
        document.drawContents(painter)
        painter.restore()
