import os

# Offline defaults for every test: keyword classifier, instant mock backend
os.environ["GEMINI_API_KEY"] = ""
os.environ["GROQ_API_KEY"] = ""
os.environ["SELF_HOSTED_BASE_URL"] = ""
os.environ["LLM_PROVIDER"] = "gemini"
os.environ["DEVICE_BACKEND"] = "mock"
os.environ["MOCK_LATENCY_SECONDS"] = "0"
os.environ["ALLOW_DEV_TOKEN"] = "true"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from devicedesk.api.main import app
from devicedesk.api.deps import get_session_registry, get_chat_graph
from devicedesk.backends.mock import MockDeviceBackend, fixture_devices
from devicedesk.core.models import UserProfile
from devicedesk.graph.main import build_chat_graph
from devicedesk.intent.keywords import KeywordClassifier
from devicedesk.services.sessions import SessionRegistry
from devicedesk.workflow.engine import WorkflowEngine


@pytest.fixture
def identity():
    return UserProfile(id="user-1", display_name="Alex Doe", email="alex.doe@example.com", job_title="Manager")


@pytest.fixture
def devices():
    return {d.id: d for d in fixture_devices()}


@pytest.fixture
def backend():
    return MockDeviceBackend(latency=0)


@pytest.fixture
def engine(backend, identity):
    return WorkflowEngine(backend=backend, identity=identity, session_id="test-session")


@pytest.fixture
def registry(backend):
    return SessionRegistry(backend)


@pytest_asyncio.fixture(scope="function")
async def async_client(registry):
    app.dependency_overrides[get_session_registry] = lambda: registry
    app.dependency_overrides[get_chat_graph] = lambda: build_chat_graph(KeywordClassifier())
    transport = ASGITransport(app=app)
    try:
        async with AsyncClient(transport=transport, base_url="http://test") as client:
            yield client
    finally:
        app.dependency_overrides = {}


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer dev-token-bypass:user-1"}
