import inspect
import logging
from opentelemetry import trace


class CustomLogger:
    """override the python logger to include the owner associated with every call"""

    def __init__(self, name, level=logging.INFO):
        self.logger = logging.getLogger(name)
        self.logger.setLevel(level)

    def get_owner_id(self):
        """retrieve the owner_id from the nearest frame on the call stack that has one"""
        try:
            stack = inspect.stack()
            for frame_info in stack:
                owner_id = frame_info.frame.f_locals.get("owner_id")
                if isinstance(owner_id, str) and owner_id:
                    return owner_id
        except Exception as error:
            self.logger.error("An error occurred while getting owner_id: %s", str(error))
        return ""

    def get_trace_context(self):
        """Get current trace and span context for log correlation"""
        try:
            current_span = trace.get_current_span()
            if current_span and current_span.is_recording():
                span_context = current_span.get_span_context()
                return {
                    "trace_id": f"{span_context.trace_id:032x}",
                    "span_id": f"{span_context.span_id:016x}",
                }
        except Exception:
            # logging here would recurse
            pass
        return {}

    def _extra(self):
        caller_name = inspect.stack()[2].function
        return {
            "caller_name": caller_name,
            "ownerid": self.get_owner_id(),
            **self.get_trace_context(),
        }

    def info(self, *args):
        """call logger.info with the caller_name and the owner"""
        self.logger.info(*args, extra=self._extra())

    def error(self, *args):
        """call logger.error with the caller_name and the owner"""
        self.logger.error(*args, extra=self._extra())

    def debug(self, *args):
        """call logger.debug with the caller_name and the owner"""
        self.logger.debug(*args, extra=self._extra())

    def exception(self, *args):
        """call logger.exception with the caller_name and the owner"""
        self.logger.exception(*args, extra=self._extra())

    def warning(self, *args):
        """call logger.warning with the caller_name and the owner"""
        self.logger.warning(*args, extra=self._extra())
