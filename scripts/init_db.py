"""
Initialize the database: create all tables.
Run with: python -m scripts.init_db
"""

import asyncio
from scheduler.database import engine, create_tables


async def init():
    print("Creating database tables...")
    await create_tables(engine)
    print("All tables created successfully.")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init())
