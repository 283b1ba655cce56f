"""
Tests for the backend API client

All requests go to an httpx.MockTransport; no network access.
"""

import asyncio
import json

import httpx
import pytest

from keutrack.services.api import (
    ApiError,
    ApiUnavailableError,
    AuthenticationError,
    ConnectionStatus,
    KeuTrackClient,
    NotFoundError,
)
from keutrack.config import ApiSettings
from keutrack.models import DiagnosticEventType


def run(coro):
    return asyncio.run(coro)


class Recorder:
    """Mock transport handler that records requests and replays responses."""

    def __init__(self, *responses):
        self.requests: list[httpx.Request] = []
        self._responses = list(responses)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self._responses.pop(0) if len(self._responses) > 1 else self._responses[0]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def calls(self) -> int:
        return len(self.requests)

    def payload(self, index: int = -1) -> dict:
        return json.loads(self.requests[index].content)


async def call(settings, handler, method, *args, diagnostics=None):
    async with KeuTrackClient(
        settings,
        transport=httpx.MockTransport(handler),
        diagnostics=diagnostics,
    ) as client:
        result = await getattr(client, method)(*args)
        return client, result


class TestRequests:
    """Tests for URL building and payload shapes."""

    def test_list_accounts(self, api_settings):
        """Test accounts are read into models and malformed rows dropped."""
        handler = Recorder(httpx.Response(200, json=[
            {"id": 1, "name": "Kas", "code": "1101", "balance": "1000"},
            {"id": 2},
            "junk",
        ]))
        _, accounts = run(call(api_settings, handler, "list_accounts"))
        assert handler.requests[0].method == "GET"
        assert handler.requests[0].url.path == "/api/accounts"
        assert len(accounts) == 1
        assert accounts[0].id == "1"
        assert str(accounts[0].balance) == "1000"

    def test_list_transactions_envelope(self, api_settings):
        """Test a {"data": [...]} envelope with alternate field names."""
        handler = Recorder(httpx.Response(200, json={"data": [
            {"id": 5, "debit_account_id": 1, "creditAccountId": 2, "nominal": 300},
        ]}))
        _, transactions = run(call(api_settings, handler, "list_transactions"))
        assert transactions[0].credit_account_id == "2"
        assert transactions[0].amount == 300

    def test_create_account_payload(self, api_settings):
        """Test the account body sent to the backend."""
        handler = Recorder(httpx.Response(201, json={"id": 10}))
        _, result = run(call(api_settings, handler, "create_account", {"name": " Kas ", "code": 1101}))
        assert result == {"id": 10}
        assert handler.requests[0].method == "POST"
        assert handler.payload() == {
            "name": "Kas",
            "balance": 0.0,
            "code": "1101",
            "category": None,
        }

    def test_create_transaction_payload(self, api_settings):
        """Test transactions are sent with canonical field names."""
        handler = Recorder(httpx.Response(201, json={"id": 11}))
        transaction = {
            "debitAccountId": 1,
            "credit_account_id": 2,
            "nominal": 150,
            "description": "Beli perlengkapan",
            "date": "2024-06-01",
        }
        run(call(api_settings, handler, "create_transaction", transaction))
        assert handler.requests[0].url.path == "/api/transactions"
        assert handler.payload() == {
            "debit_account_id": "1",
            "credit_account_id": "2",
            "amount": 150.0,
            "description": "Beli perlengkapan",
            "transaction_date": "2024-06-01",
        }

    def test_update_and_delete_paths(self, api_settings):
        """Test entity ids are placed in the path."""
        handler = Recorder(httpx.Response(200, json={"ok": True}))
        run(call(api_settings, handler, "update_account", "7", {"name": "Kas Besar"}))
        assert handler.requests[0].method == "PUT"
        assert handler.requests[0].url.path == "/api/accounts/7"

        handler = Recorder(httpx.Response(204))
        _, result = run(call(api_settings, handler, "delete_transaction", "8"))
        assert handler.requests[0].method == "DELETE"
        assert handler.requests[0].url.path == "/api/transactions/8"
        assert result is None

    def test_report_endpoint(self, api_settings):
        """Test report calls return the backend payload untouched."""
        report = {"accounts": [], "total_debit": 0, "total_credit": 0}
        handler = Recorder(httpx.Response(200, json=report))
        _, result = run(call(api_settings, handler, "get_trial_balance"))
        assert handler.requests[0].url.path == "/api/reports/trial-balance"
        assert result == report


class TestAuthentication:
    """Tests for bearer token handling."""

    def test_login_attaches_token(self, api_settings):
        """Test the token from login is sent on later requests."""
        handler = Recorder(
            httpx.Response(200, json={"token": "abc123"}),
            httpx.Response(200, json=[]),
        )

        async def scenario():
            async with KeuTrackClient(api_settings, transport=httpx.MockTransport(handler)) as client:
                assert not client.is_authenticated
                await client.login("owner", "secret")
                await client.list_accounts()
                return client

        client = run(scenario())
        assert client.is_authenticated
        assert "authorization" not in handler.requests[0].headers
        assert handler.requests[1].headers["authorization"] == "Bearer abc123"

    def test_logout_drops_token(self, api_settings):
        """Test no token is sent after logout."""
        handler = Recorder(httpx.Response(200, json=[]))
        settings = api_settings.model_copy(update={"auth_token": "preset"})

        async def scenario():
            async with KeuTrackClient(settings, transport=httpx.MockTransport(handler)) as client:
                await client.list_accounts()
                client.logout()
                await client.list_accounts()

        run(scenario())
        assert handler.requests[0].headers["authorization"] == "Bearer preset"
        assert "authorization" not in handler.requests[1].headers

    def test_unauthorized_is_not_retried(self, api_settings):
        """Test 401 raises AuthenticationError on the first attempt."""
        handler = Recorder(httpx.Response(401, json={"error": "Token tidak valid"}))
        with pytest.raises(AuthenticationError, match="Token tidak valid"):
            run(call(api_settings, handler, "list_accounts"))
        assert handler.calls == 1


class TestRetry:
    """Tests for retry and error mapping."""

    def test_transient_failure_then_success(self, api_settings, diagnostics, sink):
        """Test a 503 is retried and the later success returned."""
        handler = Recorder(
            httpx.Response(503),
            httpx.Response(200, json={"status": "ok"}),
        )
        client, result = run(call(api_settings, handler, "health_check", diagnostics=diagnostics))
        assert result == {"status": "ok"}
        assert handler.calls == 2
        assert client.status == ConnectionStatus.ONLINE
        assert client.last_error is None
        assert [e.event_type for e in sink.events] == [DiagnosticEventType.API_RETRY]

    def test_gives_up_after_max_retries(self, api_settings, diagnostics, sink):
        """Test persistent 5xx raises ApiUnavailableError."""
        handler = Recorder(httpx.Response(500, json={"error": "database down"}))
        with pytest.raises(ApiUnavailableError) as exc_info:
            run(call(api_settings, handler, "list_accounts", diagnostics=diagnostics))
        assert handler.calls == api_settings.max_retries
        assert exc_info.value.status_code == 500
        assert "database down" in str(exc_info.value)
        types = [e.event_type for e in sink.events]
        assert types.count(DiagnosticEventType.API_RETRY) == api_settings.max_retries - 1
        assert types[-1] == DiagnosticEventType.API_REQUEST_FAILED

    def test_rate_limit_is_retried(self, api_settings):
        """Test 429 counts as transient."""
        handler = Recorder(httpx.Response(429), httpx.Response(200, json=[]))
        run(call(api_settings, handler, "list_transactions"))
        assert handler.calls == 2

    def test_connection_error_marks_offline(self, api_settings):
        """Test an unreachable backend is reported as offline."""
        handler = Recorder(httpx.ConnectError("connection refused"))

        async def scenario():
            async with KeuTrackClient(api_settings, transport=httpx.MockTransport(handler)) as client:
                with pytest.raises(ApiUnavailableError):
                    await client.health_check()
                return client

        client = run(scenario())
        assert client.status == ConnectionStatus.OFFLINE
        assert client.last_error is not None
        assert handler.calls == api_settings.max_retries

    def test_timeout_is_retried(self, api_settings):
        """Test a timed-out request is tried again."""
        handler = Recorder(httpx.ReadTimeout("slow"), httpx.Response(200, json=[]))
        _, accounts = run(call(api_settings, handler, "list_accounts"))
        assert accounts == []
        assert handler.calls == 2

    def test_not_found_is_not_retried(self, api_settings):
        """Test 404 raises NotFoundError with the backend message."""
        handler = Recorder(httpx.Response(404, json={"error": "Account not found"}))
        with pytest.raises(NotFoundError, match="Account not found"):
            run(call(api_settings, handler, "delete_account", "99"))
        assert handler.calls == 1

    def test_generic_client_error(self, api_settings):
        """Test other 4xx responses fall back to a status message."""
        handler = Recorder(httpx.Response(400, text="bad request"))
        with pytest.raises(ApiError) as exc_info:
            run(call(api_settings, handler, "create_account", {"name": "Kas"}))
        assert type(exc_info.value) is ApiError
        assert str(exc_info.value) == "HTTP error! status: 400"
        assert exc_info.value.status_code == 400

    def test_invalid_json(self, api_settings):
        """Test a non-JSON success body is an error."""
        handler = Recorder(httpx.Response(200, text="<html>"))
        with pytest.raises(ApiError, match="Invalid JSON"):
            run(call(api_settings, handler, "health_check"))


class TestRequestSharing:
    """Tests for sharing one in-flight GET among concurrent callers."""

    def test_concurrent_reads_share_one_request(self, api_settings):
        """Test two simultaneous list_accounts calls hit the backend once."""
        handler = Recorder(httpx.Response(200, json=[{"id": 1, "name": "Kas"}]))

        async def scenario():
            async with KeuTrackClient(api_settings, transport=httpx.MockTransport(handler)) as client:
                return await asyncio.gather(client.list_accounts(), client.list_accounts())

        first, second = run(scenario())
        assert handler.calls == 1
        assert first == second

    def test_sequential_reads_are_not_cached(self, api_settings):
        """Test a finished request is not reused."""
        handler = Recorder(httpx.Response(200, json=[]))

        async def scenario():
            async with KeuTrackClient(api_settings, transport=httpx.MockTransport(handler)) as client:
                await client.list_accounts()
                await client.list_accounts()

        run(scenario())
        assert handler.calls == 2

    def test_writes_are_never_shared(self, api_settings):
        """Test concurrent POSTs each reach the backend."""
        handler = Recorder(httpx.Response(201, json={}))

        async def scenario():
            async with KeuTrackClient(api_settings, transport=httpx.MockTransport(handler)) as client:
                await asyncio.gather(
                    client.create_account({"name": "Kas"}),
                    client.create_account({"name": "Kas"}),
                )

        run(scenario())
        assert handler.calls == 2


class TestClientSettings:
    """Tests for client construction."""

    def test_initial_status_unknown(self, api_settings):
        """Test a fresh client has not contacted the backend."""

        async def scenario():
            async with KeuTrackClient(api_settings, transport=httpx.MockTransport(Recorder(httpx.Response(200)))) as client:
                return client.status, client.settings

        status, settings = run(scenario())
        assert status == ConnectionStatus.UNKNOWN
        assert settings.base_url == "http://keutrack.test/api"

    def test_trailing_slash_in_base_url(self):
        """Test a configured trailing slash does not double up."""
        settings = ApiSettings(base_url="http://keutrack.test/api/", base_delay=0, max_delay=0, jitter=0)
        handler = Recorder(httpx.Response(200, json=[]))
        run(call(settings, handler, "list_accounts"))
        assert handler.requests[0].url.path == "/api/accounts"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
