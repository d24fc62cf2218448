"""
Seed a demo account with a profile so the WhatsApp flow can be tried locally.
"""
import asyncio

from djibgo.infrastructure.database.repositories import SqlIdentityStore, SqlProfileRepository
from djibgo.infrastructure.database.session import dispose_engine, get_session_factory, init_db
from djibgo.modules.accounts import AccountCreateInput, AccountService

DEMO_EMAIL = "demo@djibgo.dj"


async def create_default_account():
    await init_db()
    factory = get_session_factory()
    service = AccountService(SqlIdentityStore(factory), SqlProfileRepository(factory))

    existing = await service.get_by_email(DEMO_EMAIL)
    if existing:
        print("Demo account already exists")
        await dispose_engine()
        return

    await service.create_account(
        AccountCreateInput(
            email=DEMO_EMAIL,
            password="demo-pass-123",
            full_name="Compte Démo",
            phone="+253 77 12 34 56",
        )
    )
    await dispose_engine()
    print(f"Demo account created: {DEMO_EMAIL} / demo-pass-123")


if __name__ == "__main__":
    asyncio.run(create_default_account())
