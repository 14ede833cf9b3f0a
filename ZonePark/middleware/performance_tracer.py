import time
import json
import logging
from datetime import datetime, timezone
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
import os


class JsonFormatter(logging.Formatter):
    def format(self, record):
        log_record = {
            "endpoint": getattr(record, "endpoint", ""),
            "duration_ms": getattr(record, "duration_ms", 0),
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
        }
        return json.dumps(log_record)


def get_performance_logger(log_dir) -> logging.Logger:
    log_dir = Path(log_dir).resolve()
    log_dir.mkdir(parents=True, exist_ok=True)

    # een logger per map, anders blijft een herladen app in de oude map schrijven
    perf_logger = logging.getLogger(f"zonepark.performance.{log_dir}")
    perf_logger.setLevel(logging.INFO)
    perf_logger.propagate = False

    if not perf_logger.handlers:
        file_handler = TimedRotatingFileHandler(log_dir / "perf.log", when="midnight", utc=True, delay=True)
        file_handler.namer = lambda name: name.replace("perf.log.", "perf-") + ".log"
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(JsonFormatter())
        perf_logger.addHandler(file_handler)
    return perf_logger


class PerformanceTracer:
    def __init__(self, app, alert_threshold_ms=300, log_dir=None):
        self.app = app
        self.alert_threshold_ms = alert_threshold_ms
        self.logger = get_performance_logger(log_dir or os.environ.get("ZONEPARK_LOG_DIR", "logs"))

    async def __call__(self, scope, receive, send):
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        start_time = time.perf_counter()
        request_path = scope.get("path", "")

        async def send_wrapper(message):
            if message["type"] == "http.response.start":
                duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

                self.logger.info("request", extra={"endpoint": request_path, "duration_ms": duration_ms})
                if duration_ms > self.alert_threshold_ms:
                    self.logger.warning(
                        f"Slow request detected: {request_path} took {duration_ms:.2f}ms",
                        extra={"endpoint": request_path, "duration_ms": duration_ms}
                    )

                headers = list(message.get("headers", []))
                headers.append((b"x-response-time", f"{duration_ms:.2f}ms".encode()))
                message["headers"] = headers

            await send(message)

        await self.app(scope, receive, send_wrapper)
