#!/usr/bin/env python3
"""
Initialize database schema for production.
Run this once after setting up PostgreSQL.
"""
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from app.config import DATABASE_URL
from app.database import build_engine
from app.models import Base


async def init_db(database_url: str = DATABASE_URL) -> None:
    """Create all tables (existing tables are left alone)."""
    engine = build_engine(database_url)
    
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    
    print("Database schema initialized successfully!")
    await engine.dispose()


if __name__ == "__main__":
    asyncio.run(init_db())
