"""Paper sizes and the font scale shared by every receipt renderer"""
import enum
from collections import namedtuple

PaperSize = namedtuple('PaperSize', ['width_mm', 'height_mm', 'label'])


class ReceiptSize(enum.Enum):
    A7 = "A7"
    A6 = "A6"
    A5 = "A5"
    A4 = "A4"


RECEIPT_SIZES = {
    ReceiptSize.A7: PaperSize(74, 105, 'A7 (74 × 105 mm)'),
    ReceiptSize.A6: PaperSize(105, 148, 'A6 (105 × 148 mm)'),
    ReceiptSize.A5: PaperSize(148, 210, 'A5 (148 × 210 mm)'),
    ReceiptSize.A4: PaperSize(210, 297, 'A4 (210 × 297 mm)'),
}

FONT_SCALES = {
    ReceiptSize.A7: 0.6,
    ReceiptSize.A6: 0.75,
    ReceiptSize.A5: 0.9,
    ReceiptSize.A4: 1.0,
}

# Point sizes at A4. Every renderer multiplies these by the size's font scale.
BASE_FONT_SIZES = {
    'school_name': 16,
    'school_detail': 10,
    'title': 14,
    'info': 10,
    'banner': 10,
    'table_header': 9,
    'table': 9,
    'student': 10,
    'amount_paid': 12,
    'words': 9,
    'balance': 11,
    'notes': 8,
    'signature': 8,
    'thanks': 9,
}

MARGIN_MM = 8

# On-screen box the preview is fitted into
PREVIEW_WIDTH_PX = 380
PREVIEW_HEIGHT_PX = 520

MM_PER_PT = 25.4 / 72


def parse_size(value):
    """Accept a ReceiptSize or its key ('A5'); anything else is a ValueError"""
    if isinstance(value, ReceiptSize):
        return value
    try:
        return ReceiptSize(str(value).upper())
    except ValueError:
        raise ValueError(f"Unknown receipt size: {value!r}") from None


def get_paper(size):
    return RECEIPT_SIZES[parse_size(size)]


def get_font_scale(size):
    return FONT_SCALES[parse_size(size)]


def scaled_font_sizes(size):
    """Point size of every text element for the given paper size"""
    scale = get_font_scale(size)
    return {key: round(base * scale, 3) for key, base in BASE_FONT_SIZES.items()}


def pdf_margin_mm(size):
    """PDF margins shrink with the font scale; print margins stay at MARGIN_MM."""
    return MARGIN_MM * get_font_scale(size)


def preview_fit_ratio(size):
    """Pixels per millimetre that fit the page inside the preview box"""
    paper = get_paper(size)
    return min(PREVIEW_WIDTH_PX / paper.width_mm, PREVIEW_HEIGHT_PX / paper.height_mm)


def preview_dimensions(size):
    paper = get_paper(size)
    ratio = preview_fit_ratio(size)
    return round(paper.width_mm * ratio, 1), round(paper.height_mm * ratio, 1)


def preview_font_sizes(size):
    """Pixel sizes for the on-screen preview.

    The printed point size is converted to millimetres and then to preview
    pixels with the same fit ratio as the page box, so text keeps its
    proportion to the paper.
    """
    ratio = preview_fit_ratio(size)
    return {key: round(pt * MM_PER_PT * ratio, 2)
            for key, pt in scaled_font_sizes(size).items()}
