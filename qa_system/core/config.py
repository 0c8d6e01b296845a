import os
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    app_name: str = "QA System"
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    port: int = int(os.getenv("PORT", 8080))
    api_prefix: str = os.getenv("API_PREFIX", "/api")
    log_level: str = os.getenv("LOG_LEVEL", "INFO")

    # Answer sheets live in MongoDB
    mongo_url: str = os.getenv("MONGO_URL", "mongodb://localhost:27017")
    mongo_db: str = os.getenv("MONGO_DB", "qa_system")
    answer_collection: str = os.getenv("ANSWER_COLLECTION", "answersheets")
    guard_collection: str = os.getenv("GUARD_COLLECTION", "answersheet_guards")
    # Multi-document transactions need a replica set
    mongo_transactions: bool = os.getenv("MONGO_TRANSACTIONS", "True").lower() == "true"
    mongo_timeout_ms: int = int(os.getenv("MONGO_TIMEOUT_MS", 5000))

    # Survey / question / option metadata
    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./qa_system.db")

    other_option_label: str = os.getenv("OTHER_OPTION_LABEL", "other")
    time_format: str = os.getenv("TIME_FORMAT", "%Y-%m-%d %H:%M:%S")

    class Config:
        env_file = ".env"
        extra = "allow"

settings = Settings()
