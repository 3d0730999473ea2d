import asyncio
import sys
import os

# Add parent directory to path so we can import fieldlog
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from sqlmodel import select
from fieldlog.core import security
from fieldlog.core.config import settings
from fieldlog.database import async_session_maker, init_db
from fieldlog.models.user import User, UserRole

DEFAULT_USERS = [
    {
        "email": settings.SEED_ADMIN_EMAIL,
        "password": settings.SEED_ADMIN_PASSWORD,
        "name": settings.SEED_ADMIN_NAME,
        "role": UserRole.ADMIN,
    },
    {
        "email": "manager@example.com",
        "password": "password123",
        "name": "Marcos Oliveira",
        "role": UserRole.MANAGER,
    },
    {
        "email": "server@example.com",
        "password": "password123",
        "name": "Ana Silva",
        "role": UserRole.SERVER,
    },
]

async def seed_users():
    await init_db()

    async with async_session_maker() as db:
        for data in DEFAULT_USERS:
            result = await db.execute(select(User).where(User.email == data["email"]))
            if result.scalars().first():
                print(f"Skipping {data['email']} (already exists)")
                continue

            db.add(User(
                email=data["email"],
                password=security.get_password_hash(data["password"]),
                name=data["name"],
                role=data["role"].value,
                active=True,
                approved=True
            ))
            print(f"Created {data['role'].value} {data['email']}")

        await db.commit()

if __name__ == "__main__":
    asyncio.run(seed_users())
