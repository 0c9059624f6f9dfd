"""
Tests for the HTTP and mock transports
"""

import pytest
import requests
from unittest.mock import MagicMock, patch

from osm_services import APIConfig, HttpTransport, MockTransport, Response, TransportError


class TestMockTransport:
    """Test response replay and request recording"""

    def test_replays_in_order(self):
        transport = MockTransport([b"first", "second"])
        transport.add_response(Response(status_code=404))

        assert transport.send("GET", "http://a/").body == b"first"
        assert transport.send("GET", "http://b/", {"q": "x"}).text == "second"
        assert transport.send("GET", "http://c/").status_code == 404

        assert [r.url for r in transport.requests] == ["http://a/", "http://b/", "http://c/"]
        assert transport.requests[1].params == {"q": "x"}

    def test_exhausted(self):
        transport = MockTransport()
        with pytest.raises(TransportError):
            transport.send("GET", "http://a/")
        assert len(transport.requests) == 1


class TestHttpTransport:
    """Test the requests-backed transport with the session mocked out"""

    def test_headers_and_timeout(self):
        transport = HttpTransport(APIConfig(timeout=12, user_agent="tests/1.0"))
        assert transport.session.headers["User-Agent"] == "tests/1.0"
        assert transport.timeout == 12

    def test_send(self):
        transport = HttpTransport(APIConfig(timeout=12))
        fake = MagicMock(status_code=200, content=b"<osm/>")
        with patch.object(transport.session, "request", return_value=fake) as request:
            response = transport.send("GET", "http://api.example.com/map", {"bbox": "1,2,3,4"})

        request.assert_called_once_with(
            "GET", "http://api.example.com/map", params={"bbox": "1,2,3,4"}, timeout=12
        )
        assert response.ok
        assert response.body == b"<osm/>"

    def test_non_success_status_is_returned(self):
        transport = HttpTransport()
        fake = MagicMock(status_code=410, content=b"")
        with patch.object(transport.session, "request", return_value=fake):
            response = transport.send("GET", "http://api.example.com/node/1")
        assert response.status_code == 410
        assert not response.ok

    @pytest.mark.parametrize("error", [
        requests.exceptions.Timeout("slow"),
        requests.exceptions.ConnectionError("refused"),
    ])
    def test_request_errors(self, error):
        transport = HttpTransport()
        with patch.object(transport.session, "request", side_effect=error):
            with pytest.raises(TransportError) as exc:
                transport.send("GET", "http://api.example.com/")
        assert exc.value.__cause__ is error
