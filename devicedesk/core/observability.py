import uuid
import contextvars
import json
import time
from typing import Optional, Dict, Any

# Context Variables for Trace Context
_trace_id_ctx = contextvars.ContextVar("trace_id", default=None)

class TraceManager:
    """
    Structured event emission for classification and workflow transitions.
    Events are printed as JSON lines so a log shipper can pick them up next to
    the regular application log.
    """

    @staticmethod
    def get_trace_id() -> str:
        tid = _trace_id_ctx.get()
        if not tid:
            tid = str(uuid.uuid4())
            _trace_id_ctx.set(tid)
        return tid

    @staticmethod
    def set_trace_id(trace_id: str):
        _trace_id_ctx.set(trace_id)

    @staticmethod
    def log(level: str, message: str, extra: Optional[Dict[str, Any]] = None):
        payload = {
            "timestamp": time.time(),
            "level": level.upper(),
            "message": message,
            "trace_id": TraceManager.get_trace_id(),
            **(extra or {})
        }
        print(json.dumps(payload, default=str))

    @staticmethod
    def info(message: str, **kwargs):
        TraceManager.log("INFO", message, kwargs)

    @staticmethod
    def warning(message: str, **kwargs):
        TraceManager.log("WARNING", message, kwargs)

    @staticmethod
    def error(message: str, exc: Optional[Exception] = None, **kwargs):
        extra = kwargs
        if exc:
            extra["error"] = str(exc)
            extra["error_type"] = type(exc).__name__
        TraceManager.log("ERROR", message, extra)
