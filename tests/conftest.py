# shared fixtures: recorded api payloads and a local http stub so tests never hit the network

import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


def read_fixture(name: str) -> bytes:
    return (DATA_DIR / name).read_bytes()


class _StubHandler(BaseHTTPRequestHandler):
    def do_GET(self):
        self.server.requests.append(self.path)
        status, body = self.server.responses.get(
            self.path.split("?", 1)[0], self.server.default_response
        )
        self.send_response(status)
        self.send_header("Content-Type", "application/json")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args):
        pass


class StubServer(HTTPServer):
    def __init__(self):
        super().__init__(("127.0.0.1", 0), _StubHandler)
        self.requests = []
        self.responses = {}
        self.default_response = (404, b'{"cod":"404","message":"not found"}')

    @property
    def url(self) -> str:
        host, port = self.server_address[:2]
        return f"http://{host}:{port}"

    def respond(self, path: str, body: bytes, status: int = 200) -> None:
        self.responses[path] = (status, body)


@pytest.fixture(autouse=True)
def _bypass_proxies(monkeypatch):
    # the stub listens on loopback, a proxy from the environment would never reach it
    monkeypatch.setenv("NO_PROXY", "127.0.0.1,localhost")
    monkeypatch.setenv("no_proxy", "127.0.0.1,localhost")


@pytest.fixture
def load_fixture():
    return read_fixture


@pytest.fixture
def stub_server():
    server = StubServer()
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    yield server
    server.shutdown()
    server.server_close()
    thread.join(timeout=5)
