import asyncio
import logging
from sqlalchemy import inspect
from qa_system.core.database import engine, Base
from qa_system.core.logging import configure_logging
from qa_system.models import survey  # noqa: F401
from qa_system.repositories.answer_repository import answer_repository

logger = logging.getLogger("init_db")

def init_metadata_db():
    Base.metadata.create_all(bind=engine)
    tables = inspect(engine).get_table_names()
    logger.info(f"Metadata tables: {tables}")

async def init_answer_store():
    await answer_repository.ensure_indexes()
    logger.info("Answer sheet indexes created")

if __name__ == "__main__":
    configure_logging()
    init_metadata_db()
    asyncio.run(init_answer_store())
