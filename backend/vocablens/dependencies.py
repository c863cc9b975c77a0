from vocablens.config import settings
from vocablens.database import async_session
from vocablens.services.llm_service import GatewayConfig, ModelGateway
from vocablens.services.word_store import WordStore
from vocablens.storage import SQLKeyValueStorage


def get_gateway() -> ModelGateway:
    return ModelGateway(GatewayConfig.from_settings(settings))


def get_word_store() -> WordStore:
    return WordStore(SQLKeyValueStorage(async_session))
