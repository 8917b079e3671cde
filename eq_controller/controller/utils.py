from __future__ import annotations

import sys
import traceback


def log_exception(logger, context: str, exc: Exception) -> None:
    """Log an unexpected exception to the provided logger and stderr."""
    try:
        logger("%s: %s", context, exc)
    except Exception:
        pass
    traceback.print_exception(type(exc), exc, exc.__traceback__, file=sys.stderr)
