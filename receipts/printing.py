"""Standalone print document for the browser's print dialog"""
import logging

from flask import render_template

from .sizes import MARGIN_MM, get_paper, parse_size, scaled_font_sizes

logger = logging.getLogger(__name__)


def render_print_document(data, size):
    """Complete HTML page sized with an @page rule.

    The page prints itself on load and closes once printing is done. Margins
    stay at MARGIN_MM for every size; the browser fits the page.
    """
    size = parse_size(size)
    paper = get_paper(size)
    logger.info("Rendering print document for %s on %s", data.receipt_number, size.value)
    return render_template('receipts/print.html',
                           data=data,
                           paper=paper,
                           fonts=scaled_font_sizes(size),
                           margin_mm=MARGIN_MM)
