"""
Request Context

Per-request correlation data passed explicitly through service and client
calls. Nothing here is stored globally: the HTTP layer builds one context
per inbound request and hands it down.
"""

import uuid
from dataclasses import dataclass, field
from typing import Dict, Optional

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass(frozen=True)
class RequestContext:
    """Correlation data for a single inbound request"""
    request_id: str = field(default_factory=lambda: uuid.uuid4().hex[:16])
    source: Optional[str] = None

    @classmethod
    def from_headers(cls, headers, source: Optional[str] = None) -> "RequestContext":
        """Reuse the caller's request id if it sent one"""
        request_id = headers.get(REQUEST_ID_HEADER) if headers else None
        if request_id:
            return cls(request_id=request_id, source=source)
        return cls(source=source)

    def outbound_headers(self) -> Dict[str, str]:
        """Headers that propagate this context to an upstream call"""
        return {REQUEST_ID_HEADER: self.request_id}

    def __str__(self) -> str:
        return f"[{self.request_id}]"


__all__ = ["RequestContext", "REQUEST_ID_HEADER"]
