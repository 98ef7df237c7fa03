"""
RequestContext Unit Tests
"""
import pytest

from core.request_context import RequestContext, REQUEST_ID_HEADER

pytestmark = [pytest.mark.unit]


class TestRequestContext:

    def test_generates_request_id(self):
        first, second = RequestContext(), RequestContext()

        assert len(first.request_id) == 16
        assert first.request_id != second.request_id

    def test_from_headers_reuses_id(self):
        ctx = RequestContext.from_headers({REQUEST_ID_HEADER: "req-1"}, source="order_service")

        assert ctx.request_id == "req-1"
        assert ctx.source == "order_service"

    def test_from_headers_without_id(self):
        ctx = RequestContext.from_headers({}, source="user_service")

        assert ctx.request_id
        assert ctx.source == "user_service"

    def test_outbound_headers(self):
        assert RequestContext(request_id="req-2").outbound_headers() == {"X-Request-ID": "req-2"}

    def test_str_is_log_prefix(self):
        assert str(RequestContext(request_id="req-3")) == "[req-3]"

    def test_frozen(self):
        ctx = RequestContext(request_id="req-4")

        with pytest.raises(AttributeError):
            ctx.request_id = "other"
