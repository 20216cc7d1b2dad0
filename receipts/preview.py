"""On-screen receipt preview"""
from flask import render_template
from markupsafe import Markup

from .sizes import get_paper, parse_size, preview_dimensions, preview_font_sizes


def render_preview(data, size):
    """HTML fragment of the receipt scaled to fit the preview box"""
    size = parse_size(size)
    width_px, height_px = preview_dimensions(size)
    html = render_template('receipts/_preview.html',
                           data=data,
                           paper=get_paper(size),
                           fonts=preview_font_sizes(size),
                           width_px=width_px,
                           height_px=height_px)
    return Markup(html)
