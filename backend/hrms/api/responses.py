"""Response Envelope - Success payloads share one shape"""
from typing import Any, Dict, Optional


def ok(data: Any = None, message: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """{"success": true, "message"?, "data"?, ...extra}"""
    body: Dict[str, Any] = {"success": True}
    if message is not None:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return body
