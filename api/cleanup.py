# This file serves as the entry point for a scheduled job (cron / serverless).
# It runs a single temp-file cleanup tick using the application settings.
import logging

from app.core.cleanup import cleanup_temp_files
from app.core.config import settings
from app.core.translation import get_translation

logger = logging.getLogger(__name__)


def handler(event, context):
    """Scheduled cleanup function to delete stale files in the temp upload directory."""
    logger.info("Temp cleanup cron job invoked.")
    report = cleanup_temp_files()
    logger.info("Temp cleanup cron job finished.")
    return {
        "status": "success",
        "deleted": len(report.deleted),
        "errors": len(report.errors),
        "message": get_translation(
            settings.default_language,
            "temp_cleanup_summary",
            [len(report.deleted), len(report.errors)],
        ),
    }


if __name__ == "__main__":
    cleanup_temp_files()
