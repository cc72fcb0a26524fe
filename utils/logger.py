"""
Logging utilities for the Assembly Slot Scheduler
"""
import logging
import sys
from datetime import datetime
import json
from typing import Optional

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

# Sheets/Gmail client internals and the Flask dev server log every request at INFO.
# discovery_cache warns about oauth2client on every build() call.
NOISY_LOGGERS = {
    'googleapiclient': logging.WARNING,
    'googleapiclient.discovery_cache': logging.ERROR,
    'urllib3': logging.WARNING,
    'werkzeug': logging.WARNING,
}


class SlotSchedulerLogger:
    """Process-wide logging setup for the scheduler"""

    @staticmethod
    def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None) -> logging.Logger:
        """
        Send scheduler logs to stdout and optionally ``log_file``.

        Replaces any handlers already on the root logger. Unknown level names
        fall back to INFO. Library loggers in NOISY_LOGGERS are raised to their
        listed level.
        """
        level = getattr(logging, str(log_level).upper(), None)
        if not isinstance(level, int):
            level = logging.INFO

        handlers = [logging.StreamHandler(sys.stdout)]
        if log_file:
            handlers.append(logging.FileHandler(log_file))
        logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

        for name, quiet_level in NOISY_LOGGERS.items():
            logging.getLogger(name).setLevel(quiet_level)

        return logging.getLogger()

    @staticmethod
    def log_submission(request_id: str, submission: dict, result: dict, processing_time: float):
        """Log a processed form submission for debugging"""
        logger = logging.getLogger(__name__)

        log_entry = {
            "timestamp": datetime.now().isoformat(),
            "request_id": request_id,
            "processing_time_seconds": round(processing_time, 3),
            "submission_summary": {
                "email": submission.get("email"),
                "time_requested": submission.get("time_requested"),
            },
            "result_summary": {
                "status": result.get("status"),
                "booking_id": result.get("booking", {}).get("booking_id"),
                "start": result.get("booking", {}).get("start"),
            },
        }

        logger.info(f"Submission processed: {json.dumps(log_entry, indent=2)}")
