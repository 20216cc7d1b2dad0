"""Receipt document engine: one data model, three renderers"""
from .words import number_to_words
from .numbering import generate_receipt_number
from .sizes import ReceiptSize, RECEIPT_SIZES, get_font_scale, scaled_font_sizes
from .data import (ReceiptData, StudentLine, ReceiptMode, PaymentContext, FamilyMember,
                   SchoolInfo, EditableFields, build_receipt_data)
from .session import ReceiptSession, ReceiptSessionStore
from .preview import render_preview
from .printing import render_print_document
from .pdf import render_pdf, pdf_filename
