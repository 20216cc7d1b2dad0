from flask_sqlalchemy import SQLAlchemy
from flask_login import UserMixin
from datetime import datetime, date, timedelta
from decimal import Decimal
import enum

db = SQLAlchemy()


# ===========================
#  ENUMS FOR BETTER ORGANIZATION
# ===========================
class UserRole(enum.Enum):
    OWNER = "OWNER"
    SUPER_ADMIN = "SUPER_ADMIN"


class SubscriptionStatus(enum.Enum):
    TRIAL = "TRIAL"
    ACTIVE = "ACTIVE"
    EXPIRED = "EXPIRED"


class PaymentMethod(enum.Enum):
    CASH = "cash"
    MOBILE_MONEY = "mobile_money"
    BANK_TRANSFER = "bank_transfer"
    CARD = "card"


class StudentStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    GRADUATED = "GRADUATED"


# ===========================
#  USER / TENANT PROFILE
# ===========================
class User(UserMixin, db.Model):
    """School owner account. Every tenant-owned row points back here."""
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    google_id = db.Column(db.String(100), unique=True)
    email = db.Column(db.String(255), unique=True, nullable=False)
    name = db.Column(db.String(255), nullable=False)
    role = db.Column(db.Enum(UserRole), default=UserRole.OWNER)
    is_active = db.Column(db.Boolean, default=True)

    # School profile (printed on receipts)
    school_name = db.Column(db.String(200))
    school_address = db.Column(db.String(300))
    school_phone = db.Column(db.String(50))

    # Subscription
    subscription_status = db.Column(db.Enum(SubscriptionStatus), default=SubscriptionStatus.TRIAL)
    subscription_plan = db.Column(db.String(50))
    trial_start_date = db.Column(db.DateTime, default=datetime.utcnow)
    trial_end_date = db.Column(db.DateTime)
    subscription_end_date = db.Column(db.DateTime)
    max_students = db.Column(db.Integer, default=200)

    # Dashboard collection target; None means "this month's expected fees"
    monthly_target = db.Column(db.Numeric(12, 2))

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    last_active = db.Column(db.DateTime)

    def __repr__(self):
        return f"<User {self.email}>"

    @property
    def is_super_admin(self):
        return self.role == UserRole.SUPER_ADMIN

    def start_trial(self, days, now=None):
        now = now or datetime.utcnow()
        self.subscription_status = SubscriptionStatus.TRIAL
        self.trial_start_date = now
        self.trial_end_date = now + timedelta(days=days)

    def is_subscription_expired(self, now=None):
        """Trial past its end, explicitly expired, or active past its end date"""
        now = now or datetime.utcnow()

        if self.subscription_status == SubscriptionStatus.EXPIRED:
            return True
        if self.subscription_status == SubscriptionStatus.TRIAL and self.trial_end_date:
            return now > self.trial_end_date
        if self.subscription_status == SubscriptionStatus.ACTIVE and self.subscription_end_date:
            return now > self.subscription_end_date
        return False


# ===========================
#  FEE STRUCTURES
# ===========================
class SchoolClass(db.Model):
    """A class and its fee structure (Grade 3, Form 1, ...)"""
    __tablename__ = "classes"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(100), nullable=False)
    monthly_fee = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    annual_fee = db.Column(db.Numeric(12, 2), nullable=False, default=0)
    term = db.Column(db.String(20), default="Term 1")
    academic_year = db.Column(db.String(20))
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    students = db.relationship("Student", back_populates="class_obj")

    __table_args__ = (db.UniqueConstraint("user_id", "name", name="unique_tenant_class"),)

    def __repr__(self):
        return f"<SchoolClass {self.name}>"


# ===========================
#  STUDENTS
# ===========================
class Student(db.Model):
    """Student records"""
    __tablename__ = "students"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    name = db.Column(db.String(200), nullable=False)
    admission_number = db.Column(db.String(30))
    class_id = db.Column(db.Integer, db.ForeignKey("classes.id"))

    parent_name = db.Column(db.String(100))
    phone = db.Column(db.String(20))
    email = db.Column(db.String(100))

    status = db.Column(db.Enum(StudentStatus), default=StudentStatus.ACTIVE)
    admission_date = db.Column(db.Date, default=date.today)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    class_obj = db.relationship("SchoolClass", back_populates="students")
    payments = db.relationship("Payment", back_populates="student", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Student {self.admission_number} - {self.name}>"

    @property
    def class_name(self):
        return self.class_obj.name if self.class_obj else "N/A"

    @property
    def class_fee(self):
        """Fee charged by the student's class, zero when unassigned"""
        if not self.class_obj:
            return Decimal('0')
        return Decimal(str(self.class_obj.monthly_fee or 0))

    def get_current_balance(self):
        """Class fee minus everything this student has ever paid"""
        return self.class_fee - get_student_total_paid(self.id)


# ===========================
#  PAYMENTS
# ===========================
class Payment(db.Model):
    """Student payments"""
    __tablename__ = "payments"

    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False)
    student_id = db.Column(db.Integer, db.ForeignKey("students.id"), nullable=False)

    amount = db.Column(db.Numeric(10, 2), nullable=False)
    payment_date = db.Column(db.Date, default=date.today)
    payment_method = db.Column(db.String(30), default=PaymentMethod.CASH.value)
    payment_type = db.Column(db.String(30), default="tuition")
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    # Relationships
    student = db.relationship("Student", back_populates="payments")

    def __repr__(self):
        return f"<Payment {self.id} - {self.amount}>"


# ===========================
#  QUERY HELPERS
# ===========================
def get_student_total_paid(student_id):
    """Sum of every payment recorded against a student"""
    total = db.session.query(db.func.sum(Payment.amount)) \
                .filter_by(student_id=student_id).scalar() or 0
    return Decimal(str(total))


def percentage(part, whole, places=0):
    """part / whole as a percentage, 0 when there is nothing to compare against"""
    if not whole:
        return 0
    value = Decimal(str(part)) / Decimal(str(whole)) * 100
    return round(float(value), places) if places else int(round(value))


def get_student_fees(user_id):
    """(student, class fee, total paid) for every active student of the tenant"""
    paid = dict(db.session.query(Payment.student_id, db.func.sum(Payment.amount))
                .filter(Payment.user_id == user_id)
                .group_by(Payment.student_id).all())
    students = Student.query.filter_by(user_id=user_id, status=StudentStatus.ACTIVE).all()
    return [(s, s.class_fee, Decimal(str(paid.get(s.id) or 0))) for s in students]


def get_tenant_totals(user_id, today=None):
    """Headline numbers for the dashboard"""
    today = today or date.today()
    month_start = today.replace(day=1)

    total_collected = db.session.query(db.func.sum(Payment.amount)) \
                          .filter_by(user_id=user_id).scalar() or 0
    month_collected = db.session.query(db.func.sum(Payment.amount)) \
                          .filter(Payment.user_id == user_id,
                                  Payment.payment_date >= month_start,
                                  Payment.payment_date <= today) \
                          .scalar() or 0

    fees = get_student_fees(user_id)
    expected_fees = sum((fee for _, fee, _ in fees), Decimal('0'))
    outstanding = sum((max(fee - paid, Decimal('0')) for _, fee, paid in fees), Decimal('0'))
    total_collected = Decimal(str(total_collected))

    return {
        'total_students': len(fees),
        'total_classes': SchoolClass.query.filter_by(user_id=user_id).count(),
        'total_collected': total_collected,
        'month_collected': Decimal(str(month_collected)),
        'expected_fees': expected_fees,
        'outstanding': outstanding,
        'collection_rate': percentage(total_collected, expected_fees),
    }


def get_collection_target(user, stats):
    """This month's target and how far collections have got towards it (capped at 100%)"""
    target = Decimal(str(user.monthly_target)) if user.monthly_target else stats['expected_fees']
    progress = min(percentage(stats['month_collected'], target), 100) if target > 0 else 0
    return {
        'target': target,
        'is_custom': user.monthly_target is not None,
        'collected': stats['month_collected'],
        'progress': progress,
    }


def add_months(day, months):
    """First day of the month ``months`` after (or before) ``day``'s month"""
    index = day.year * 12 + day.month - 1 + months
    return date(index // 12, index % 12 + 1, 1)


def get_monthly_analysis(user_id, today=None, months=12):
    """Collected vs expected fees for each of the last ``months`` months, oldest first.

    Expected is the class fee of every active student admitted by the end of
    the month. ``change`` compares collections with the previous month and is
    None when there is nothing to compare against.
    """
    today = today or date.today()
    first_month = add_months(today, -(months - 1))

    payments = db.session.query(Payment.payment_date, Payment.amount) \
        .filter(Payment.user_id == user_id,
                Payment.payment_date >= first_month,
                Payment.payment_date < add_months(today, 1)).all()
    fees = get_student_fees(user_id)

    rows = []
    previous = None
    for offset in range(months):
        start = add_months(first_month, offset)
        end = add_months(start, 1)

        collected = sum((Decimal(str(amount)) for paid_on, amount in payments
                         if paid_on and start <= paid_on < end), Decimal('0'))
        expected = sum((fee for student, fee, _ in fees
                        if student.admission_date is None or student.admission_date < end), Decimal('0'))

        rows.append({
            'month': start.strftime('%b %Y'),
            'collected': collected,
            'expected': expected,
            'rate': percentage(collected, expected, places=1),
            'change': percentage(collected - previous, previous, places=1) if previous else None,
        })
        previous = collected

    return rows
