"""Data the receipt engine reads from the tenant's records.

Lookups never raise into the receipt flow: a failure is logged and the
affected field degrades (empty school header, fallback balance).
"""
import logging
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from models import db, User, Student, get_student_total_paid
from .data import FamilyMember, SchoolInfo

logger = logging.getLogger(__name__)

BALANCE_FALLBACKS = {
    'zero': Decimal('0'),
    'unknown': None,
}


def fallback_balance(name):
    try:
        return BALANCE_FALLBACKS[name]
    except KeyError:
        raise ValueError(f"RECEIPT_BALANCE_FALLBACK must be one of {sorted(BALANCE_FALLBACKS)}, "
                         f"got {name!r}") from None


def fetch_school_info(user_id):
    """School header for the tenant; empty fields if the profile can't be read"""
    try:
        user = db.session.get(User, user_id)
    except SQLAlchemyError:
        logger.exception("Could not load school profile for user %s", user_id)
        db.session.rollback()
        return SchoolInfo()

    if not user:
        logger.warning("No profile found for user %s, receipt header left blank", user_id)
        return SchoolInfo()

    return SchoolInfo(
        name=user.school_name or '',
        address=user.school_address or '',
        phone=user.school_phone or '',
    )


def student_member(student, fallback='zero'):
    """Balance context for one student. Only this student degrades on failure."""
    student_id, name, admission_number = student.id, student.name, student.admission_number
    class_name = 'N/A'

    try:
        class_name = student.class_name
        total_paid = get_student_total_paid(student_id)
        balance = student.class_fee - total_paid
    except SQLAlchemyError:
        logger.exception("Balance lookup failed for student %s, using %r fallback", student_id, fallback)
        db.session.rollback()
        total_paid = None
        balance = fallback_balance(fallback)

    return FamilyMember(
        student_id=student_id,
        name=name,
        admission_number=admission_number,
        class_name=class_name,
        total_paid=total_paid,
        balance=balance,
    )


def load_family_members(user_id, payer_id, fallback='zero', include_all=True):
    """Balance context for the payer and (optionally) every other student of the tenant.

    Every lookup completes before the mapping is returned. The payer is always
    present in the result.
    """
    fallback_balance(fallback)

    query = Student.query.filter_by(user_id=user_id)
    if not include_all:
        query = query.filter_by(id=payer_id)
    students = query.order_by(Student.name).all()

    members = {}
    for student in students:
        members[student.id] = student_member(student, fallback)

    if payer_id not in members:
        # Payer belongs to the payment, so it is loaded even if filtered out above
        payer = db.session.get(Student, payer_id)
        if payer is not None:
            members[payer_id] = student_member(payer, fallback)

    return members


def filter_members(members, search):
    """Search the family list by name or admission number"""
    search = (search or '').strip().lower()
    if not search:
        return list(members.values())
    return [m for m in members.values()
            if search in m.name.lower()
            or (m.admission_number and search in m.admission_number.lower())]
