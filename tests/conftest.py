"""
Pytest configuration and shared fixtures for the ESP adapter tests
"""
import sys
from pathlib import Path

import httpx
import pytest

# Add repository root to path so ``main`` and ``esp_adapter`` import uninstalled
sys.path.insert(0, str(Path(__file__).parent.parent))

from esp_adapter import MailchimpAdapter  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / 'fixtures' / 'mailchimp'
API_KEY = 'TEST-us21'


@pytest.fixture
def load_fixture():
    """Return the raw text of a Mailchimp response fixture"""
    def _load(name):
        return (FIXTURES_DIR / name).read_text(encoding='utf-8')
    return _load


class StubServer:
    """Serves queued responses through ``httpx.MockTransport`` and records requests"""

    def __init__(self):
        self.responses = []
        self.requests = []

    def queue(self, status=200, body='', raise_exc=None):
        self.responses.append((status, body, raise_exc))
        return self

    def handler(self, request):
        self.requests.append(request)
        status, body, raise_exc = self.responses.pop(0)
        if raise_exc is not None:
            raise raise_exc(request)
        return httpx.Response(status, content=body.encode('utf-8') if body else b'')

    def transport(self):
        return httpx.MockTransport(self.handler)


@pytest.fixture
def stub_server():
    return StubServer()


@pytest.fixture
def mailchimp(stub_server):
    """Mailchimp adapter wired to the stub server"""
    return MailchimpAdapter(API_KEY, http_transport=stub_server.transport())
