import os
from pathlib import Path

import httpx
import pytest
import structlog
from structlog.testing import capture_logs


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Pytest hook to run before collecting tests.

    Initialize the ordering domain and push its domain_context, the same way
    the storefront does at startup.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env

    from ordering.domain import ordering
    from storefront import init_domains

    init_domains()
    ordering.domain_context().push()


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)


class FakeBackend:
    """Scripted marketplace backend served through ``httpx.MockTransport``.

    Routes are keyed by (method, path). A route answers with a fixed
    response, a list of responses consumed in order, or a handler called
    with the request. Unknown routes answer 404.
    """

    base_url = "http://backend.test"

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method, path, status=200, json=None, text=None, handler=None):
        if handler is not None:
            self.routes[(method, path)] = handler
        else:
            self.routes[(method, path)] = _responder(status, json, text)
        return self

    def sequence(self, method, path, bodies, status=200):
        pending = list(bodies)

        def handler(request):
            body = pending.pop(0) if len(pending) > 1 else pending[0]
            return httpx.Response(status, json=body)

        self.routes[(method, path)] = handler
        return self

    def fail(self, method, path, error=httpx.ConnectError):
        def handler(request):
            raise error("backend unreachable", request=request)

        self.routes[(method, path)] = handler
        return self

    def calls(self, method, path):
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": "Route not found"})
        return route(request)

    def http_client(self) -> httpx.Client:
        return httpx.Client(base_url=self.base_url, transport=httpx.MockTransport(self.handle))


def _responder(status, json_body, text):
    def handler(request):
        if text is not None:
            return httpx.Response(status, text=text)
        if json_body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=json_body)

    return handler


@pytest.fixture()
def backend():
    return FakeBackend()


@pytest.fixture()
def token():
    return {"value": "tok-buyer-001"}


@pytest.fixture()
def api_client(backend, token):
    from shared.api import MarketplaceClient

    client = MarketplaceClient(http=backend.http_client(), token_provider=lambda: token["value"])
    yield client
    client.http.close()


@pytest.fixture()
def storage():
    from shared.storage.memory_adapter import MemoryStorage

    return MemoryStorage()


@pytest.fixture()
def make_product():
    """Factory for catalogue products as the backend serves them."""
    from catalogue.product.product import Product

    def _make(product_id="prod-001", title="Wireless Earbuds", price=1000.0, **kwargs):
        return Product(id=product_id, title=title, price=price, **kwargs)

    return _make


@pytest.fixture(autouse=True)
def run_around_tests():
    """Reset the storage adapter factory after every test"""
    yield

    from shared.storage import reset_storage

    reset_storage()


@pytest.fixture()
def log_capture(monkeypatch):
    """Capture the structlog entries emitted by the given modules.

    Module loggers may already be cached by ``configure_logging()``, so each
    module gets a fresh logger for the duration of the test.
    """

    def capture(*modules):
        for module in modules:
            monkeypatch.setattr(module, "logger", structlog.get_logger(module.__name__))
        return capture_logs()

    return capture
