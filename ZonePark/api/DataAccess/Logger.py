from logging.handlers import TimedRotatingFileHandler
import os
import logging
import json
from datetime import datetime, timezone
from ZonePark.api.Models.User import User


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_entry = {
            "endpoint": getattr(record, "endpoint", ""),
            "user": getattr(record, "user", None),
            "timestamp": datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S"),
        }
        return json.dumps(log_entry)


class Logger:
    """Access log: one JSON line per authenticated request, rotated at midnight (UTC)."""

    def __init__(self, path: str):
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)

        # one logger per file so tests with their own tmp dir don't share handlers
        self.logger = logging.getLogger(f"zonepark.access.{os.path.abspath(path)}")
        self.logger.setLevel(logging.INFO)
        self.logger.propagate = False

        if not self.logger.handlers:
            handler = TimedRotatingFileHandler(path, when="midnight", utc=True)
            handler.namer = lambda name: name.replace("access.log.", "access-") + ".log"
            handler.setFormatter(JsonFormatter())
            self.logger.addHandler(handler)


    def log(self, user: User, endpoint: str):
        self.logger.info(
            "access",
            extra={
                "endpoint": endpoint,
                "user": user.email if user is not None else None,
            }
        )


    def close(self):
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)
