"""Script to create a new user via CLI."""

import asyncio
from getpass import getpass

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from traintrack.core.db import AsyncSessionLocal
from traintrack.core.security import hash_password
from traintrack.models.enums import UserRole
from traintrack.models.user import User

ROLE_CHOICES = {role.value: role for role in UserRole}


def parse_role(raw: str) -> UserRole:
    """Map CLI input to a role, defaulting to employee."""
    cleaned = raw.strip().lower().replace("-", "_").replace(" ", "_")
    if not cleaned:
        return UserRole.EMPLOYEE
    if cleaned == "hr":
        return UserRole.HR_ADMIN
    if cleaned not in ROLE_CHOICES:
        raise ValueError(f"Unknown role: {raw!r} (choose from {', '.join(ROLE_CHOICES)})")
    return ROLE_CHOICES[cleaned]


def get_user_input():
    """Collect user information from CLI input."""
    print("\nCreate New User\n")

    email = input("Email: ").strip().lower()
    password = getpass("Password: ").strip()
    first_name = input("First Name: ").strip()
    last_name = input("Last Name: ").strip()
    department = input("Department (optional): ").strip() or None
    role = parse_role(input("Role (employee/manager/hr_admin) [employee]: "))
    manager_email = input("Manager email (optional): ").strip().lower() or None

    return email, password, first_name, last_name, department, role, manager_email


async def find_user(db: AsyncSession, email: str) -> User | None:
    stmt = select(User).where(User.email == email)
    result = await db.execute(stmt)
    return result.scalar_one_or_none()


async def create_user_record(
    db: AsyncSession,
    email: str,
    password: str,
    first_name: str,
    last_name: str,
    role: UserRole,
    department: str | None = None,
    manager: User | None = None,
) -> User:
    """Create and return new user record."""
    user = User(
        email=email,
        hashed_password=hash_password(password),
        first_name=first_name,
        last_name=last_name,
        role=role.value,
        department=department,
        manager_id=manager.id if manager else None,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def main() -> None:
    email, password, first_name, last_name, department, role, manager_email = get_user_input()

    async with AsyncSessionLocal() as db:
        if await find_user(db, email):
            print(f"\nUser {email} already exists")
            return

        manager = None
        if manager_email:
            manager = await find_user(db, manager_email)
            if manager is None:
                print(f"\nManager {manager_email} not found")
                return

        user = await create_user_record(
            db, email, password, first_name, last_name, role, department, manager
        )
        await db.commit()

    print(f"\nCreated {user.role} {user.display_name} <{user.email}> (id={user.id})")


def run() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    run()
