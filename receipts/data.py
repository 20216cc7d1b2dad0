"""Receipt document model and the builder that assembles it.

A ``ReceiptData`` is a projection: it is rebuilt whenever the receipt
settings change and is never edited in place. The preview, print and PDF
renderers all read the same value.
"""
import enum
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Optional, Sequence, Tuple

from .words import number_to_words

PAYMENT_METHOD_LABELS = {
    'cash': 'Cash',
    'mobile_money': 'Mobile Money (M-Pesa)',
    'bank_transfer': 'Bank Transfer',
    'card': 'Card',
}

DEFAULT_SIGNATURE_LABEL = 'Authorized Signature / School Stamp'


class ReceiptMode(enum.Enum):
    INDIVIDUAL = "individual"
    FAMILY = "family"


# ===========================
#  INPUTS (external records the builder depends on)
# ===========================
@dataclass(frozen=True)
class PaymentContext:
    """The payment a receipt is issued for, flattened with its student"""
    id: int
    student_id: int
    student_name: str
    admission_number: Optional[str]
    class_name: str
    amount: Decimal
    payment_date: str
    payment_method: str
    notes: str = ''

    @classmethod
    def from_payment(cls, payment, date_format='%d/%m/%Y'):
        student = payment.student
        return cls(
            id=payment.id,
            student_id=student.id,
            student_name=student.name,
            admission_number=student.admission_number,
            class_name=student.class_name,
            amount=Decimal(str(payment.amount)),
            payment_date=payment.payment_date.strftime(date_format) if payment.payment_date else '',
            payment_method=payment.payment_method or 'cash',
            notes=payment.notes or '',
        )


@dataclass(frozen=True)
class FamilyMember:
    """A student that can appear on a receipt, with balance context.

    ``balance`` is None when the lookup failed and the configured fallback
    is 'unknown'.
    """
    student_id: int
    name: str
    admission_number: Optional[str]
    class_name: str
    total_paid: Optional[Decimal]
    balance: Optional[Decimal]


@dataclass(frozen=True)
class SchoolInfo:
    name: str = ''
    address: str = ''
    phone: str = ''


@dataclass(frozen=True)
class EditableFields:
    payment_date: str
    amount_in_words: str
    notes: str = ''
    signature_label: str = DEFAULT_SIGNATURE_LABEL

    @classmethod
    def seeded_from(cls, payment, signature_label=DEFAULT_SIGNATURE_LABEL):
        """Defaults shown when a receipt is first opened"""
        return cls(
            payment_date=payment.payment_date,
            amount_in_words=number_to_words(round_amount(payment.amount)),
            notes=payment.notes or '',
            signature_label=signature_label,
        )


# ===========================
#  DOCUMENT MODEL
# ===========================
@dataclass(frozen=True)
class StudentLine:
    student_name: str
    admission_number: Optional[str]
    class_name: str
    amount_paid: Decimal
    balance: Optional[Decimal]


@dataclass(frozen=True)
class ReceiptData:
    receipt_number: str
    payment_date: str
    payment_method: str
    students: Tuple[StudentLine, ...]
    amount_in_words: str
    notes: str
    signature_label: str
    school_name: str = ''
    school_address: str = ''
    school_phone: str = ''
    currency: str = 'KES'

    @property
    def total_paid(self):
        return sum((line.amount_paid for line in self.students), Decimal('0'))

    @property
    def is_family(self):
        return len(self.students) > 1

    @property
    def balance_label(self):
        return 'Total Balance' if self.is_family else 'Balance'

    @property
    def total_balance(self):
        """Sum of all line balances; None if any balance is unknown"""
        balances = [line.balance for line in self.students]
        if any(balance is None for balance in balances):
            return None
        return sum(balances, Decimal('0'))


def round_amount(amount):
    """Whole shillings, halves rounded up, for the words line"""
    return int(Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def payment_method_label(code):
    if not code:
        return PAYMENT_METHOD_LABELS['cash']
    return PAYMENT_METHOD_LABELS.get(code, code)


def normalize_selection(payer_id, selected_ids):
    """Payer first, then the other selected students in the order they were picked"""
    ordered = [payer_id]
    for student_id in selected_ids or ():
        if student_id not in ordered:
            ordered.append(student_id)
    return ordered


def build_receipt_data(mode, payment, selected_ids: Sequence[int], members: Dict[int, FamilyMember],
                       school: SchoolInfo, fields: EditableFields, receipt_number: str,
                       currency='KES') -> ReceiptData:
    """Assemble the receipt document.

    ``members`` maps student id to balance context and must contain the payer.
    In family mode only the payer's line carries the payment amount; siblings
    are listed for their balances and are not charged.
    """
    mode = ReceiptMode(mode)
    payer = members[payment.student_id]
    lines = []

    if mode == ReceiptMode.INDIVIDUAL:
        lines.append(StudentLine(
            student_name=payment.student_name,
            admission_number=payment.admission_number,
            class_name=payment.class_name,
            amount_paid=payment.amount,
            balance=payer.balance,
        ))
    else:
        for student_id in normalize_selection(payment.student_id, selected_ids):
            member = members.get(student_id)
            if member is None:
                continue
            lines.append(StudentLine(
                student_name=member.name,
                admission_number=member.admission_number,
                class_name=member.class_name,
                amount_paid=payment.amount if student_id == payment.student_id else Decimal('0'),
                balance=member.balance,
            ))

    return ReceiptData(
        receipt_number=receipt_number,
        payment_date=fields.payment_date,
        payment_method=payment_method_label(payment.payment_method),
        students=tuple(lines),
        amount_in_words=fields.amount_in_words,
        notes=fields.notes,
        signature_label=fields.signature_label,
        school_name=school.name,
        school_address=school.address,
        school_phone=school.phone,
        currency=currency,
    )
