"""
Pytest Configuration and Fixtures
==================================
Loads test environment and provides reusable event, settings and
simulated webhook fixtures.
"""

import json
import sys
import threading
from http.server import BaseHTTPRequestHandler, HTTPServer
from pathlib import Path

import pytest
from dotenv import load_dotenv

# Add lib to path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "lib"))

# Load test environment variables
env_file = project_root / ".env.test"
if env_file.exists():
    load_dotenv(env_file)
else:
    # Try loading from CI environment
    load_dotenv()


PROXY_ENV_VARS = (
    "HTTP_PROXY", "HTTPS_PROXY", "ALL_PROXY", "NO_PROXY",
    "http_proxy", "https_proxy", "all_proxy", "no_proxy",
)


# =============================================================================
# EVENT FIXTURES
# =============================================================================

@pytest.fixture
def legacy_event_data():
    """Sensu 1.x event as delivered on stdin."""
    return {
        "client": {
            "name": "host1",
            "address": "10.0.0.5",
            "subscriptions": ["linux", "web"],
        },
        "check": {
            "name": "disk",
            "status": 2,
            "output": "DISK CRITICAL - /var is 97% full",
        },
        "occurrences": 1,
        "action": "create",
    }


@pytest.fixture
def mapped_event_data():
    """Sensu 2.x event mapped into the 1.x shape."""
    return {
        "v2_event_mapped_into_v1": True,
        "client": {
            "name": "legacy-name",
            "address": "10.0.0.9",
            "subscriptions": ["entity:host2", "linux"],
            "metadata": {"name": "host2", "namespace": "default"},
        },
        "check": {
            "name": "legacy-check",
            "status": 1,
            "output": "CPU WARNING - load 4.2",
            "metadata": {"name": "cpu", "namespace": "default"},
        },
    }


@pytest.fixture
def legacy_event(legacy_event_data):
    from sensu_teams.events import parse_event

    return parse_event(legacy_event_data)


@pytest.fixture
def mapped_event(mapped_event_data):
    from sensu_teams.events import parse_event

    return parse_event(mapped_event_data)


# =============================================================================
# SETTINGS FIXTURES
# =============================================================================

@pytest.fixture
def settings_section():
    """Minimal settings section with a webhook URL."""
    return {
        "webhook_url": "https://outlook.office.com/webhook/abc123/IncomingWebhook/def456",
    }


@pytest.fixture
def encryption_key(mock_env):
    """Fernet key exported as SENSU_TEAMS_ENCRYPTION_KEY."""
    from cryptography.fernet import Fernet

    key = Fernet.generate_key().decode()
    mock_env({"SENSU_TEAMS_ENCRYPTION_KEY": key})
    return key


@pytest.fixture
def write_json(tmp_path):
    """Helper to write a JSON file under tmp_path and return its path."""
    def _write_json(name, data):
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data))
        return str(path)
    return _write_json


@pytest.fixture
def write_template(tmp_path):
    """Helper to write a template file under tmp_path and return its path."""
    def _write_template(name, source):
        path = tmp_path / name
        path.write_text(source)
        return str(path)
    return _write_template


# =============================================================================
# SIMULATED WEBHOOK FIXTURES
# =============================================================================

class _RecordingHandler(BaseHTTPRequestHandler):
    """Records every request and answers with the server's canned response."""

    def do_POST(self):
        length = int(self.headers.get("Content-Length", 0))
        body = self.rfile.read(length).decode("utf-8")
        self.server.requests.append({
            "path": self.path,
            "headers": dict(self.headers),
            "body": body,
        })

        response_body = self.server.response_body.encode("utf-8")
        self.send_response(self.server.status_code)
        self.send_header("Content-Type", "text/plain")
        self.send_header("Content-Length", str(len(response_body)))
        self.end_headers()
        self.wfile.write(response_body)

    def log_message(self, format, *args):
        pass


def _start_server():
    server = HTTPServer(("127.0.0.1", 0), _RecordingHandler)
    server.requests = []
    server.status_code = 200
    server.response_body = "1"
    server.url = f"http://127.0.0.1:{server.server_port}/webhookb2/abc123/IncomingWebhook/def456"

    thread = threading.Thread(target=server.serve_forever)
    thread.daemon = True
    thread.start()
    return server


@pytest.fixture
def no_env_proxies(monkeypatch):
    """Make sure proxy variables from the CI environment do not interfere."""
    for name in PROXY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def webhook_server(no_env_proxies):
    """Local HTTP server standing in for the Teams webhook."""
    server = _start_server()
    yield server
    server.shutdown()
    server.server_close()


@pytest.fixture
def proxy_server(no_env_proxies):
    """Local HTTP server standing in for a forward proxy; answers 200 itself."""
    server = _start_server()
    yield server
    server.shutdown()
    server.server_close()


# =============================================================================
# UTILITY FIXTURES
# =============================================================================

@pytest.fixture
def mock_env(monkeypatch):
    """Helper to mock environment variables."""
    def _mock_env(env_dict):
        for key, value in env_dict.items():
            monkeypatch.setenv(key, value)
    return _mock_env


# =============================================================================
# TEST MARKERS COLLECTION
# =============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast tests with no network access")
    config.addinivalue_line("markers", "integration: Tests that talk to a local simulated webhook")
