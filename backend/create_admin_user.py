"""Create an admin user, or promote an existing account to admin

Usage:
    python create_admin_user.py AD2024/001 "Board Admin" <password>
"""
import asyncio
import sys

from sqlalchemy import select

from app.core.database import get_session_local, init_db, close_db
from app.core.security import get_password_hash
from app.models.user import User
from app.schemas.auth import SignupRequest


async def create_admin(roll_number: str, name: str, password: str):
    # Same rules as public signup
    data = SignupRequest(roll_number=roll_number, name=name, password=password)

    await init_db()
    session_local = get_session_local()
    async with session_local() as db:
        result = await db.execute(
            select(User).where(User.roll_number == data.roll_number)
        )
        existing = result.scalar_one_or_none()

        if existing:
            existing.is_admin = True
            existing.is_verified = True
            existing.password_hash = get_password_hash(data.password)
            print(f"Promoted existing user to admin: {existing.roll_number}")
        else:
            admin = User(
                roll_number=data.roll_number,
                name=data.name,
                password_hash=get_password_hash(data.password),
                is_verified=True,
                is_admin=True,
            )
            db.add(admin)
            print(f"Created admin user: {data.roll_number}")

        await db.commit()

    await close_db()
    print("\nLogin credentials:")
    print(f"Roll number: {data.roll_number}")


if __name__ == "__main__":
    if len(sys.argv) != 4:
        print(__doc__)
        sys.exit(1)
    asyncio.run(create_admin(sys.argv[1], sys.argv[2], sys.argv[3]))
