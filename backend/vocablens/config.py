from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "sqlite+aiosqlite:///vocablens.db"

    llm_provider: str = "openai"  # "openai" (any OpenAI-compatible endpoint) or "anthropic"
    llm_api_key: str = ""
    llm_base_url: str | None = "https://api.groq.com/openai/v1"
    llm_timeout_seconds: float = 30.0

    extraction_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"  # must accept images
    prediction_model: str = "llama-3.3-70b-versatile"
    correction_model: str = "llama-3.3-70b-versatile"

    log_level: str = "INFO"

    model_config = {"env_prefix": "VOCABLENS_", "env_file": ".env"}


settings = Settings()
