"""Start the API server"""

import uvicorn
from insight_engine.core.config import settings
from insight_engine.utils.logger import log


if __name__ == "__main__":
    log.info("=" * 60)
    log.info("Tabular Insight Engine - starting")
    log.info("=" * 60)
    log.info(f"Address: http://{settings.api_host}:{settings.api_port}")
    log.info(f"API docs: http://{settings.api_host}:{settings.api_port}/docs")
    log.info(f"Debug: {settings.debug}")
    log.info(f"Row limit: {settings.max_request_rows}")
    log.info("=" * 60)

    uvicorn.run(
        "insight_engine.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.debug,
        log_level="info"
    )
