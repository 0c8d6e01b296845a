from motor.motor_asyncio import AsyncIOMotorClient
from qa_system.core.config import settings

# Every store call carries a deadline instead of hanging on an unreachable server
mongo_client = AsyncIOMotorClient(
    settings.mongo_url,
    serverSelectionTimeoutMS=settings.mongo_timeout_ms,
    timeoutMS=settings.mongo_timeout_ms,
)
mongo_db = mongo_client[settings.mongo_db]
