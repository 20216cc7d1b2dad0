# Promote an existing account to super admin
import sys

from app import create_app
from models import db, User, UserRole


def promote(email):
    user = User.query.filter_by(email=email).first()
    if not user:
        print(f"❌ No user found with email: {email}")
        return False

    print(f"✅ Found user: {user.name} ({user.email}), current role: {user.role.value}")
    user.role = UserRole.SUPER_ADMIN
    db.session.commit()
    print(f"🎉 Role updated successfully! New role: {user.role.value}")
    return True


if __name__ == '__main__':
    if len(sys.argv) != 2:
        print("Usage: python make_admin.py <email>")
        sys.exit(1)

    with create_app().app_context():
        sys.exit(0 if promote(sys.argv[1]) else 1)
