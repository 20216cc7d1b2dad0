"""Receipt sessions.

A ``ReceiptSession`` is created when a receipt is opened for a payment and
discarded when it is closed. It owns the receipt number (so every preview,
print and PDF of the receipt carries the same number) and the settings the
user changes along the way. Sessions are kept in the Flask session under a
random token.
"""
import logging
import secrets
import time

from .data import EditableFields, ReceiptMode, SchoolInfo, normalize_selection
from .numbering import generate_receipt_number
from .sizes import parse_size

logger = logging.getLogger(__name__)

SESSION_KEY = 'receipt_sessions'

# The store lives in the session cookie, which browsers cap at about 4 KB
MAX_OPEN_SESSIONS = 10


class ReceiptSession:

    def __init__(self, token, payment_id, payer_id, receipt_number, fields, school,
                 mode=ReceiptMode.INDIVIDUAL, size='A5', selected_ids=None):
        self.token = token
        self.payment_id = payment_id
        self.payer_id = payer_id
        self.receipt_number = receipt_number
        self.fields = fields
        self.school = school
        self.mode = ReceiptMode(mode)
        self.size = parse_size(size)
        self.selected_ids = normalize_selection(payer_id, selected_ids)

    @classmethod
    def open(cls, payment, school, size='A5', signature_label=None):
        """Start a receipt for ``payment`` (a PaymentContext)"""
        fields = EditableFields.seeded_from(payment)
        if signature_label:
            fields = EditableFields(fields.payment_date, fields.amount_in_words,
                                    fields.notes, signature_label)
        return cls(
            token=secrets.token_urlsafe(8),
            payment_id=payment.id,
            payer_id=payment.student_id,
            receipt_number=generate_receipt_number(),
            fields=fields,
            school=school,
            size=size,
        )

    def toggle_student(self, student_id):
        """Add or remove a sibling. The payer can never be removed.

        Returns False when the toggle was refused.
        """
        if student_id == self.payer_id:
            return False
        if student_id in self.selected_ids:
            self.selected_ids.remove(student_id)
        else:
            self.selected_ids.append(student_id)
        return True

    def update(self, mode=None, size=None, payment_date=None, amount_in_words=None,
               notes=None, signature_label=None):
        if mode is not None:
            self.mode = ReceiptMode(mode)
        if size is not None:
            self.size = parse_size(size)
        self.fields = EditableFields(
            payment_date=self.fields.payment_date if payment_date is None else payment_date,
            amount_in_words=self.fields.amount_in_words if amount_in_words is None else amount_in_words,
            notes=self.fields.notes if notes is None else notes,
            signature_label=self.fields.signature_label if signature_label is None else signature_label,
        )

    def to_dict(self):
        return {
            'token': self.token,
            'payment_id': self.payment_id,
            'payer_id': self.payer_id,
            'receipt_number': self.receipt_number,
            'mode': self.mode.value,
            'size': self.size.value,
            'selected_ids': list(self.selected_ids),
            'fields': {
                'payment_date': self.fields.payment_date,
                'amount_in_words': self.fields.amount_in_words,
                'notes': self.fields.notes,
                'signature_label': self.fields.signature_label,
            },
            'school': {
                'name': self.school.name,
                'address': self.school.address,
                'phone': self.school.phone,
            },
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            token=data['token'],
            payment_id=data['payment_id'],
            payer_id=data['payer_id'],
            receipt_number=data['receipt_number'],
            fields=EditableFields(**data['fields']),
            school=SchoolInfo(**data['school']),
            mode=data['mode'],
            size=data['size'],
            selected_ids=data['selected_ids'],
        )


class ReceiptSessionStore:
    """Receipt sessions kept in a dict-like store (the Flask session).

    At most ``limit`` sessions are kept; saving past the limit evicts the
    least recently saved ones.
    """

    def __init__(self, storage, limit=MAX_OPEN_SESSIONS):
        self.storage = storage
        self.limit = limit

    def _sessions(self):
        return self.storage.get(SESSION_KEY, {})

    def get(self, token):
        data = self._sessions().get(token)
        if data is None:
            return None
        return ReceiptSession.from_dict(data)

    def add(self, receipt_session):
        """Save a newly opened session, replacing any open one for the same payment"""
        sessions = {token: data for token, data in self._sessions().items()
                    if data['payment_id'] != receipt_session.payment_id}
        self._write(sessions, receipt_session)

    def save(self, receipt_session):
        self._write(dict(self._sessions()), receipt_session)

    def _write(self, sessions, receipt_session):
        entry = receipt_session.to_dict()
        entry['saved_at'] = time.time()
        sessions[receipt_session.token] = entry

        others = sorted((t for t in sessions if t != receipt_session.token),
                        key=lambda t: sessions[t].get('saved_at', 0))
        for token in others[:max(len(sessions) - self.limit, 0)]:
            evicted = sessions.pop(token)
            logger.info("Evicted receipt session %s (%s)", token, evicted['receipt_number'])

        # Reassign so the Flask session notices the change
        self.storage[SESSION_KEY] = sessions

    def discard(self, token):
        sessions = dict(self._sessions())
        removed = sessions.pop(token, None)
        self.storage[SESSION_KEY] = sessions
        if removed:
            logger.info("Closed receipt session %s (%s)", token, removed['receipt_number'])
        return removed is not None
