#!/usr/bin/env python3
"""
Script to change a user's role.
Usage: python make_admin.py <email> [ROLE]
"""

import sys

from app.db.database import session_scope
from app.domain.enums import UserRole
from app.infrastructure.orm import UserModel


def set_user_role(email: str, role: UserRole = UserRole.ADMIN) -> bool:
    """Give the user with this email the given role."""
    with session_scope() as db:
        user = db.query(UserModel).filter(UserModel.email == email.lower()).first()
        if user is None:
            print(f"❌ User with email '{email}' not found!")
            return False

        user.role = role
        db.commit()
        print(f"✅ '{email}' is now {role.value}")
        return True


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)

    role_name = sys.argv[2].upper() if len(sys.argv) > 2 else UserRole.ADMIN.value
    try:
        target_role = UserRole(role_name)
    except ValueError:
        print(f"❌ Unknown role '{role_name}'. Choose from: {', '.join(r.value for r in UserRole)}")
        sys.exit(1)

    sys.exit(0 if set_user_role(sys.argv[1], target_role) else 1)
