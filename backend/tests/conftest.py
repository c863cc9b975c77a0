from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from vocablens.dependencies import get_gateway, get_word_store
from vocablens.main import app
from vocablens.models import Base
from vocablens.services.llm_service import GatewayConfig, ModelGateway
from vocablens.services.word_store import WordStore
from vocablens.storage import SQLKeyValueStorage

TEST_DB_URL = "sqlite+aiosqlite://"

engine = create_async_engine(
    TEST_DB_URL,
    echo=False,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
test_session = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture(autouse=True)
async def setup_db():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


def override_get_word_store():
    return WordStore(SQLKeyValueStorage(test_session))


def override_get_gateway():
    return ModelGateway(GatewayConfig(api_key="test-key", provider="openai"))


app.dependency_overrides[get_word_store] = override_get_word_store
app.dependency_overrides[get_gateway] = override_get_gateway


@pytest.fixture
def storage():
    return SQLKeyValueStorage(test_session)


@pytest.fixture
def store(storage):
    return WordStore(storage)


@pytest.fixture
def gateway():
    return ModelGateway(GatewayConfig(api_key="test-key", provider="openai"))


# --- HTTP client ---


@pytest.fixture
async def client():
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c


# --- Boundary mock: OpenAI-compatible SDK ---


@pytest.fixture
def mock_openai():
    """Mock openai.AsyncOpenAI at the SDK boundary.

    Usage:
        set_response("json string"): completion text (None for empty content)
        set_error(exc): raise exc from chat.completions.create
    """
    state = {"text": "", "error": None}

    def set_response(text):
        state["text"] = text
        state["error"] = None

    def set_error(exc):
        state["error"] = exc

    mock_create = AsyncMock()

    async def _create_side_effect(**kwargs):
        if state["error"] is not None:
            raise state["error"]
        message = MagicMock()
        message.content = state["text"]
        choice = MagicMock()
        choice.message = message
        response = MagicMock()
        response.choices = [choice]
        return response

    mock_create.side_effect = _create_side_effect

    mock_client_instance = MagicMock()
    mock_client_instance.chat.completions.create = mock_create

    with patch("openai.AsyncOpenAI", return_value=mock_client_instance) as client_cls:
        yield {
            "set_response": set_response,
            "set_error": set_error,
            "create_mock": mock_create,
            "client_cls": client_cls,
        }


# --- Boundary mock: Anthropic SDK ---


@pytest.fixture
def mock_anthropic():
    """Mock anthropic.AsyncAnthropic at the SDK boundary."""
    state = {"text": ""}

    def set_response(text):
        state["text"] = text

    mock_create = AsyncMock()

    async def _create_side_effect(**kwargs):
        content_block = MagicMock()
        content_block.text = state["text"]
        message = MagicMock()
        message.content = [content_block]
        return message

    mock_create.side_effect = _create_side_effect

    mock_client_instance = MagicMock()
    mock_client_instance.messages.create = mock_create

    with patch("anthropic.AsyncAnthropic", return_value=mock_client_instance) as client_cls:
        yield {
            "set_response": set_response,
            "create_mock": mock_create,
            "client_cls": client_cls,
        }


# --- Canned completions ---


@pytest.fixture
def suggestions():
    return [
        {
            "word": "cup",
            "level": "beginner",
            "sentence": "I drink tea from a cup.",
            "conversationStarters": [
                "Is this your favorite cup?",
                "Do you prefer tea or coffee?",
                "Where did you buy this cup?",
            ],
        },
        {
            "word": "saucer",
            "level": "intermediate",
            "sentence": "She set the cup on its saucer.",
            "conversationStarters": ["Do you still use saucers?"],
        },
        {
            "word": "porcelain",
            "level": "advanced",
            "sentence": "The porcelain cup was a family heirloom.",
        },
    ]


@pytest.fixture
def flows():
    return [
        {"theirResponse": "I'm good, thanks!", "yourFollowUp": "Glad to hear it."},
        {"theirResponse": "Pretty busy today.", "yourFollowUp": "Anything I can help with?"},
        {"theirResponse": "Not great, honestly.", "yourFollowUp": "Want to talk about it?"},
    ]
