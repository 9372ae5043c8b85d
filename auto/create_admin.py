#!/usr/bin/env python3
"""
Create Admin User Script.

Creates an admin user directly in the database. Registration only ever
creates readers, so this is how the first admin comes into existence.

Usage:
    python auto/create_admin.py
    python auto/create_admin.py --email admin@example.com --password Secret123

Environment Variables:
    ADMIN_EMAIL: Admin email (default: admin@example.com)
    ADMIN_PASSWORD: Admin password (default: auto-generated)
    ADMIN_USERNAME: Admin username (default: admin)
    ADMIN_NAME: Display name (default: Administrator)
"""

from argparse import ArgumentParser, Namespace, RawDescriptionHelpFormatter
from asyncio import run as asyncio_run
from dataclasses import dataclass
from os import environ
from secrets import token_urlsafe
from sys import exit as sys_exit

from sqlmodel import or_, select
from sqlmodel.ext.asyncio.session import AsyncSession

from inkpost.db.database import transaction
from inkpost.managers.password_manager import hash_password
from inkpost.models import UserDB
from inkpost.rabc import Role

MIN_PASSWORD_LENGTH = 8


@dataclass(frozen=True)
class AdminUserData:
    """
    Admin user creation data.

    Attributes
    ----------
    email : str
        Admin email address.
    password : str
        Admin password (will be hashed).
    username : str
        Admin username.
    name : str
        Display name.
    """

    email: str
    password: str
    username: str
    name: str


def generate_secure_password(length: int = 16) -> str:
    """Generate a random password with mixed character classes."""
    password = token_urlsafe(length)
    return f"Admin{password[:12]}!1"


async def create_admin_user(session: AsyncSession, admin_data: AdminUserData) -> UserDB:
    """
    Create an admin user in the database.

    Parameters
    ----------
    session : AsyncSession
        Open session; the caller commits.
    admin_data : AdminUserData
        Admin user data container.

    Returns
    -------
    UserDB
        Created admin user.

    Raises
    ------
    ValueError
        If the password is too short, or a user with the email or username exists.
    """
    if len(admin_data.password) < MIN_PASSWORD_LENGTH:
        msg = f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        raise ValueError(msg)

    email = admin_data.email.strip().lower()
    existing = await session.execute(
        select(UserDB).where(
            # pyrefly: ignore [bad-argument-type]
            or_(UserDB.email == email, UserDB.username == admin_data.username),
        ),
    )
    if existing.scalars().first():
        msg = f"User with email '{email}' or username '{admin_data.username}' already exists"
        raise ValueError(msg)

    admin_user = UserDB(
        username=admin_data.username,
        email=email,
        name=admin_data.name,
        password_hash=await hash_password(admin_data.password),
        role=Role.ADMIN,
    )
    session.add(admin_user)
    await session.flush()
    await session.refresh(admin_user)
    return admin_user


def get_admin_data(args: Namespace) -> tuple[AdminUserData, bool]:
    """
    Build AdminUserData from arguments, falling back to environment variables.

    Returns
    -------
    tuple[AdminUserData, bool]
        The data and whether the password was auto-generated.
    """
    password = args.password or environ.get("ADMIN_PASSWORD")
    auto_generated = password is None
    data = AdminUserData(
        email=args.email or environ.get("ADMIN_EMAIL", "admin@example.com"),
        password=password or generate_secure_password(),
        username=args.username or environ.get("ADMIN_USERNAME", "admin"),
        name=args.name or environ.get("ADMIN_NAME", "Administrator"),
    )
    return data, auto_generated


def parse_args() -> Namespace:
    parser = ArgumentParser(
        description="Create an admin user in the database.",
        formatter_class=RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python auto/create_admin.py -e admin@mysite.com -p MySecurePass123
  python auto/create_admin.py --username editor --name "Chief Editor"
        """,
    )
    parser.add_argument("-e", "--email", default=None, help="Admin email")
    parser.add_argument("-p", "--password", default=None, help="Admin password")
    parser.add_argument("-u", "--username", default=None, help="Admin username")
    parser.add_argument("-n", "--name", default=None, help="Admin display name")
    return parser.parse_args()


async def main() -> int:
    """
    Run the admin creation process.

    Returns
    -------
    int
        Exit code (0 for success, 1 for error).
    """
    admin_data, auto_generated = get_admin_data(parse_args())

    try:
        async with transaction() as session:
            admin = await create_admin_user(session, admin_data)
    except ValueError as e:
        print(f"\n❌ Error: {e}")
        return 1

    print("\n✅ Admin user created successfully!")
    print(f"   ID:       {admin.id}")
    print(f"   Username: {admin.username}")
    print(f"   Email:    {admin.email}")
    if auto_generated:
        print(f"   Password: {admin_data.password}")
        print("\n⚠️  This password was auto-generated. Save it now!")
    print("\nYou can now login with:")
    print("  curl -X POST 'http://localhost:8000/auth/login' \\")
    print("    -H 'Content-Type: application/x-www-form-urlencoded' \\")
    print(f"    -d 'username={admin.email}&password=YOUR_PASSWORD'")
    return 0


if __name__ == "__main__":
    sys_exit(asyncio_run(main()))
