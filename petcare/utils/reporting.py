# petcare/utils/reporting.py
import logging
from collections import deque

logger = logging.getLogger(__name__)


class ErrorReporter:
    """Records failures of best-effort steps that must never abort the caller.

    ``history`` bounds how many reports are kept in memory for inspection;
    the process-wide reporter keeps none and only logs.
    """

    def __init__(self, log=None, history=0):
        self.log = log or logger
        self.reports = deque(maxlen=history)

    def report(self, event, error, **context):
        entry = {
            'event': event,
            'error': str(error),
            'error_type': type(error).__name__,
            'context': context,
        }
        self.reports.append(entry)
        self.log.error(f"{event} failed: {error}", exc_info=error,
                       extra={'event': event, 'context': context})
        return entry

    def attempt(self, event, func, *args, **context):
        """Run ``func(*args)``; on failure report it and return None."""
        try:
            return func(*args)
        except Exception as e:
            self.report(event, e, **context)
            return None


default_reporter = ErrorReporter()
