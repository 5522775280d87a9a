import httpx
import pytest

from idm_client.config.settings import Settings
from idm_client.utils.http import HttpClient, HttpTelemetry


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )


@pytest.fixture(autouse=True)
def mock_env_vars(monkeypatch):
    """Set required environment variables for tests.

    This fixture automatically sets up the minimum required environment
    variables needed for the Settings class to initialize properly during tests.
    """
    monkeypatch.setenv("IDM_DOMAIN", "tenant.example.com")
    monkeypatch.setenv("IDM_MANAGEMENT_TOKEN", "test-management-token")
    monkeypatch.setenv("IDM_HTTP_TELEMETRY", "true")
    monkeypatch.setenv("IDM_HTTP_TIMEOUT", "30")
    monkeypatch.setenv("LOG_LEVEL", "INFO")

    yield


@pytest.fixture(autouse=True)
def reset_telemetry():
    """Keep telemetry data from leaking between tests."""
    HttpTelemetry.reset()
    yield
    HttpTelemetry.reset()


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def client(settings):
    """HttpClient for the management API base path, driven by mocked responses."""
    return HttpClient(settings, base_path="/api/v2/")


@pytest.fixture
def json_response():
    """Factory for JSON responses."""

    def _make(body=None, status_code=200, headers=None):
        if body is None:
            return httpx.Response(status_code, headers=headers)
        return httpx.Response(status_code, json=body, headers=headers)

    return _make


@pytest.fixture
def mock_transport():
    """Build an httpx client backed by a MockTransport handler.

    Requests received by the handler are recorded on ``client.sent``.
    """
    clients = []

    def _make(handler):
        sent = []

        def _record(request):
            sent.append(request)
            return handler(request)

        transport_client = httpx.Client(transport=httpx.MockTransport(_record))
        transport_client.sent = sent
        clients.append(transport_client)
        return transport_client

    yield _make

    for transport_client in clients:
        transport_client.close()
