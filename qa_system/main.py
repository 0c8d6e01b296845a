import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from qa_system.core.config import settings
from qa_system.core.database import engine, Base
from qa_system.core.logging import configure_logging
from qa_system.controllers import admin_controller, user_controller
from qa_system.models import survey  # noqa: F401  registers metadata tables

configure_logging()
logger = logging.getLogger("main")

Base.metadata.create_all(bind=engine)

if not settings.mongo_transactions:
    logger.warning(
        "MONGO_TRANSACTIONS is off: superseding a unique answer sheet is not atomic, "
        "concurrent submissions may leave two unique sheets"
    )

app = FastAPI(
    title=settings.app_name,
    debug=settings.debug,
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = getattr(settings, "api_prefix", "/api")

# Include routers
app.include_router(user_controller.router, prefix=API_PREFIX)
app.include_router(admin_controller.router, prefix=API_PREFIX)

@app.get("/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "qa_system.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=settings.debug
    )
