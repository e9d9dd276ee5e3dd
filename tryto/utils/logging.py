# # Unset: tryto logs through the application's own loguru handlers
# unset TRYTO_LOG_LEVEL

# # Trace every attempt, retry and fallback to stdout in JSON format
# export TRYTO_LOG_LEVEL=TRACE
# export TRYTO_LOG_OUTPUT=stdout
# export TRYTO_LOG_FORMAT=json

# # Log to both stderr and file in human-readable format
# export TRYTO_LOG_LEVEL=INFO
# export TRYTO_LOG_OUTPUT=both
# export TRYTO_LOG_FILE=tryto.log

# # Silence tryto entirely
# export TRYTO_DISABLE_LOGGING=1


import json
import os
import sys
from typing import List

from loguru import logger


class JsonFormatter:
    def __call__(self, record):
        log_record = {
            "time": record["time"].isoformat(),
            "level": record["level"].name,
            "message": record["message"],
            "module": record["module"],
            "function": record["function"],
            "line": record["line"],
            "extra": record["extra"],
        }

        if record["exception"] is not None:
            log_record["exception"] = {
                "type": record["exception"].type.__name__,
                "value": str(record["exception"].value),
            }

        # loguru treats the returned string as a template
        return json.dumps(log_record, default=str).replace("{", "{{").replace("}", "}}") + "\n"


# handler ids added by setup_logger; the host application's handlers are left alone
_handler_ids: List[int] = []


def setup_logger():
    """Set up tryto's own sinks based on environment variables.

    Without ``TRYTO_LOG_LEVEL`` no sink is added and records go to whatever
    handlers the application configured (loguru's stderr handler by default).
    """
    while _handler_ids:
        logger.remove(_handler_ids.pop())

    if os.environ.get("TRYTO_DISABLE_LOGGING", "").lower() in ["true", "1", "yes"]:
        logger.disable("tryto")
        return

    logger.enable("tryto")
    log_level = os.environ.get("TRYTO_LOG_LEVEL", "").upper()
    if not log_level:
        return

    log_output = os.environ.get("TRYTO_LOG_OUTPUT", "stderr").lower()
    log_format = os.environ.get("TRYTO_LOG_FORMAT", "human").lower()

    human_format = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"
    fmt = JsonFormatter() if log_format == "json" else human_format

    sinks = []
    if log_output in ["stdout", "both"]:
        sinks.append(sys.stdout)
    if log_output in ["stderr", "both"]:
        sinks.append(sys.stderr)
    if log_output in ["file", "both"]:
        sinks.append(os.environ.get("TRYTO_LOG_FILE", "tryto.log"))

    for sink in sinks:
        _handler_ids.append(logger.add(sink, format=fmt, level=log_level, filter="tryto"))


def get_logger():
    """Get the configured logger."""
    return logger


# Set up the logger when this module is imported
setup_logger()
