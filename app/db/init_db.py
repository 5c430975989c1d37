import asyncio
import logging
import os
from app.core.database import engine, async_session_maker
from app.models import *  # Import all models
from app.db.seeds.initial_data import create_initial_data

logger = logging.getLogger(__name__)

async def create_tables():
    """Create all database tables"""
    try:
        from app.db.base import Base

        async with engine.begin() as conn:
            # Create all tables
            await conn.run_sync(Base.metadata.create_all)

        logger.info("✅ Database tables created successfully")

    except Exception as e:
        logger.error(f"❌ Error creating tables: {str(e)}")
        raise

async def init_db():
    """Initialize the database"""
    env = os.getenv("ENVIRONMENT", "development").lower()
    try:
        logger.info(f"🗄️  Initializing database for {env} environment...")

        # Production schema is owned by Alembic
        if env != "production":
            await create_tables()

        # Create initial data
        async with async_session_maker() as session:
            await create_initial_data(session)

        logger.info("✅ Database initialized successfully")

    except Exception as e:
        logger.error(f"❌ Database initialization failed: {str(e)}")
        raise

if __name__ == "__main__":
    from app.core.logging_config import setup_logging

    setup_logging()
    asyncio.run(init_db())
