from datetime import date
from decimal import Decimal

import pytest

from app import create_app
from models import db, User, UserRole, SchoolClass, Student, Payment
from receipts.data import EditableFields, FamilyMember, PaymentContext, SchoolInfo


@pytest.fixture
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def tenant(app):
    user = User(
        email='owner@sunrise.test',
        name='Grace Owner',
        role=UserRole.OWNER,
        school_name='Sunrise Academy',
        school_address='P.O. Box 1234, Nairobi',
        school_phone='0712 345 678',
    )
    user.start_trial(14)
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def school(tenant):
    """Jane (Grade 3, paid 15,000 of 20,000) and her brother John (Grade 1, owes 3,000)"""
    grade3 = SchoolClass(user_id=tenant.id, name='Grade 3', monthly_fee=Decimal('20000'))
    grade1 = SchoolClass(user_id=tenant.id, name='Grade 1', monthly_fee=Decimal('3000'))
    db.session.add_all([grade3, grade1])
    db.session.flush()

    jane = Student(user_id=tenant.id, name='Jane Doe', admission_number='ADM001', class_id=grade3.id)
    john = Student(user_id=tenant.id, name='John Doe', admission_number='ADM002', class_id=grade1.id)
    db.session.add_all([jane, john])
    db.session.flush()

    payment = Payment(user_id=tenant.id, student_id=jane.id, amount=Decimal('15000'),
                      payment_date=date(2024, 3, 5), payment_method='mobile_money',
                      notes='Term 1 fees')
    db.session.add(payment)
    db.session.commit()

    return {'jane': jane, 'john': john, 'payment': payment, 'grade3': grade3, 'grade1': grade1}


@pytest.fixture
def other_tenant(app):
    user = User(email='owner@hillside.test', name='Other Owner', school_name='Hillside School')
    user.start_trial(14)
    db.session.add(user)
    db.session.flush()

    school_class = SchoolClass(user_id=user.id, name='Form 1', monthly_fee=Decimal('10000'))
    db.session.add(school_class)
    db.session.flush()
    student = Student(user_id=user.id, name='Mary Roe', admission_number='H001', class_id=school_class.id)
    db.session.add(student)
    db.session.flush()
    payment = Payment(user_id=user.id, student_id=student.id, amount=Decimal('4000'),
                      payment_date=date(2024, 3, 6))
    db.session.add(payment)
    db.session.commit()
    return {'user': user, 'student': student, 'payment': payment}


def login(client, user):
    with client.session_transaction() as sess:
        sess['_user_id'] = str(user.id)
        sess['_fresh'] = True


@pytest.fixture
def client(app, tenant):
    client = app.test_client()
    login(client, tenant)
    return client


# Plain receipt inputs, no database involved
@pytest.fixture
def jane_payment():
    return PaymentContext(
        id=1,
        student_id=1,
        student_name='Jane Doe',
        admission_number='ADM001',
        class_name='Grade 3',
        amount=Decimal('15000'),
        payment_date='05/03/2024',
        payment_method='cash',
        notes='',
    )


@pytest.fixture
def members():
    return {
        1: FamilyMember(1, 'Jane Doe', 'ADM001', 'Grade 3', Decimal('15000'), Decimal('5000')),
        2: FamilyMember(2, 'John Doe', 'ADM002', 'Grade 1', Decimal('0'), Decimal('3000')),
        3: FamilyMember(3, 'Bartholomew Alexander Doe', None, 'Grade 5', Decimal('0'), Decimal('1250.50')),
    }


@pytest.fixture
def school_info():
    return SchoolInfo(name='Sunrise Academy', address='P.O. Box 1234, Nairobi', phone='0712 345 678')


@pytest.fixture
def fields(jane_payment):
    return EditableFields.seeded_from(jane_payment)
