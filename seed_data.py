#!/usr/bin/env python3
"""
Sample data script for the school fee receipts app.
Creates a demo school with classes, families of students and payments so the
receipt flow (individual and family receipts) can be tried straight away.
"""
import random
import sys
from datetime import date, timedelta
from decimal import Decimal

from app import create_app
from models import db, User, UserRole, SchoolClass, Student, Payment, PaymentMethod, SubscriptionStatus

DEMO_EMAIL = 'demo@school.example'

CLASSES = [
    ('PP1', Decimal('12000')),
    ('Grade 1', Decimal('15000')),
    ('Grade 3', Decimal('18000')),
    ('Grade 5', Decimal('20000')),
    ('Grade 7', Decimal('24000')),
]

FAMILIES = {
    'Kamau': ['Wanjiku', 'Njoroge', 'Wangari'],
    'Otieno': ['Akinyi', 'Omondi'],
    'Wafula': ['Nafula', 'Barasa', 'Simiyu'],
    'Mutua': ['Mwende'],
    'Kimani': ['Nyambura', 'Karanja'],
    'Ochieng': ['Adhiambo'],
}


def clear_demo_school():
    """Remove the demo tenant and everything it owns"""
    print("🗑️  Clearing existing demo data...")
    user = User.query.filter_by(email=DEMO_EMAIL).first()
    if user:
        Payment.query.filter_by(user_id=user.id).delete()
        Student.query.filter_by(user_id=user.id).delete()
        SchoolClass.query.filter_by(user_id=user.id).delete()
        db.session.delete(user)
        db.session.commit()
    print("✅ Demo data cleared!")


def create_demo_school():
    print("🏫 Creating demo school...")
    user = User(
        email=DEMO_EMAIL,
        name='Demo Owner',
        role=UserRole.OWNER,
        school_name='Sunrise Academy',
        school_address='P.O. Box 1234, Nairobi',
        school_phone='0712 345 678',
        subscription_plan='Medium',
        max_students=500,
    )
    user.start_trial(30)
    user.subscription_status = SubscriptionStatus.ACTIVE
    user.subscription_end_date = user.trial_end_date
    db.session.add(user)
    db.session.commit()
    print(f"✅ Created {user.school_name} ({user.email})")
    return user


def create_classes(user):
    print("📚 Creating classes...")
    classes = []
    for name, fee in CLASSES:
        school_class = SchoolClass(user_id=user.id, name=name, monthly_fee=fee,
                                   annual_fee=fee * 3, term='Term 1',
                                   academic_year=str(date.today().year))
        db.session.add(school_class)
        classes.append(school_class)
    db.session.commit()
    print(f"✅ Created {len(classes)} classes")
    return classes


def create_students(user, classes):
    """Siblings share a surname, parent and phone number"""
    print("👨‍🎓 Creating students...")
    students = []
    admission_counter = 1001

    for surname, first_names in FAMILIES.items():
        parent_phone = f"07{random.randint(10000000, 99999999)}"
        for first_name in first_names:
            student = Student(
                user_id=user.id,
                name=f"{first_name} {surname}",
                admission_number=f"ADM{admission_counter}",
                class_id=random.choice(classes).id,
                parent_name=f"Mr/Mrs {surname}",
                phone=parent_phone,
                admission_date=date.today() - timedelta(days=random.randint(30, 700)),
            )
            db.session.add(student)
            students.append(student)
            admission_counter += 1

    db.session.commit()
    print(f"✅ Created {len(students)} students")
    return students


def create_payments(user, students):
    print("💰 Creating payment records...")
    methods = [m.value for m in PaymentMethod]
    # M-Pesa is the most common way parents pay
    weights = [0.25, 0.55, 0.15, 0.05]
    payments_created = 0

    for student in students:
        for _ in range(random.randint(1, 3)):
            method = random.choices(methods, weights=weights)[0]
            payment = Payment(
                user_id=user.id,
                student_id=student.id,
                amount=Decimal(random.choice([2500, 5000, 7500, 10000])),
                payment_date=date.today() - timedelta(days=random.randint(0, 60)),
                payment_method=method,
                notes=f"Term fees via {method.replace('_', ' ')}",
            )
            db.session.add(payment)
            payments_created += 1

    db.session.commit()
    print(f"✅ Created {payments_created} payment records")


def main(config_name=None):
    """Populate the database with the demo school"""
    print("🏫 SCHOOL FEE RECEIPTS - DEMO DATA")
    print("=" * 60)

    app = create_app(config_name)
    with app.app_context():
        clear_demo_school()
        user = create_demo_school()
        classes = create_classes(user)
        students = create_students(user, classes)
        create_payments(user, students)

        print("\n" + "=" * 60)
        print("✅ DATABASE POPULATION COMPLETE!")
        print("\n📊 SUMMARY:")
        print(f"   📚 Classes: {SchoolClass.query.filter_by(user_id=user.id).count()}")
        print(f"   👨‍🎓 Students: {Student.query.filter_by(user_id=user.id).count()}")
        print(f"   💰 Payments: {Payment.query.filter_by(user_id=user.id).count()}")
        print(f"\n🎉 Demo school ready for {DEMO_EMAIL}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
