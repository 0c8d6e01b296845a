import uvicorn
from qa_system.core.config import settings

if __name__ == "__main__":
    uvicorn.run(
        "qa_system.main:app",
        host="localhost",
        port=settings.port,
        reload=settings.debug
    )
