"""Run the payments service under uvicorn."""

import sys
import uvicorn
from pydantic import ValidationError
from payments_service.core_settings import get_settings
from payments_service.domain.exceptions import ConfigurationError
from shared.core import setup_logging, get_logger

logger = get_logger(__name__)

def main():
    try:
        settings = get_settings()
        settings.validate_store()
    except (ConfigurationError, ValidationError) as e:
        setup_logging(service_name="payments-service")
        logger.critical(f"Invalid configuration: {e}")
        sys.exit(1)

    uvicorn.run(
        "payments_service.main:app",
        host=settings.HOST,
        port=settings.PORT,
        log_level=settings.LOG_LEVEL.lower()
    )

if __name__ == "__main__":
    main()
