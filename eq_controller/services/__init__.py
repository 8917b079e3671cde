from .dialog_timers import DialogTimers

__all__ = ["DialogTimers"]
