import base64
import json
import logging
import re

import anthropic
import openai
from pydantic import BaseModel, TypeAdapter, ValidationError

from vocablens.config import Settings
from vocablens.errors import (
    ConfigurationError,
    MalformedResponseError,
    UpstreamError,
)
from vocablens.schemas.vocabulary import (
    ConversationFlow,
    Level,
    MistakeFix,
    VocabularySuggestion,
)

logger = logging.getLogger(__name__)

PROVIDERS = ("openai", "anthropic")

# A single fenced block around the whole reply is tolerated; anything else around the JSON is not.
_CODE_FENCE = re.compile(r"```(?:json)?[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)

_suggestions_adapter = TypeAdapter(list[VocabularySuggestion])
_flows_adapter = TypeAdapter(list[ConversationFlow])


class GatewayConfig(BaseModel):
    api_key: str = ""
    provider: str = "openai"
    base_url: str | None = None
    extraction_model: str = "meta-llama/llama-4-scout-17b-16e-instruct"
    prediction_model: str = "llama-3.3-70b-versatile"
    correction_model: str = "llama-3.3-70b-versatile"
    timeout_seconds: float = 30.0

    model_config = {"frozen": True}

    @classmethod
    def from_settings(cls, settings: Settings) -> "GatewayConfig":
        return cls(
            api_key=settings.llm_api_key,
            provider=settings.llm_provider,
            base_url=settings.llm_base_url,
            extraction_model=settings.extraction_model,
            prediction_model=settings.prediction_model,
            correction_model=settings.correction_model,
            timeout_seconds=settings.llm_timeout_seconds,
        )


def parse_json_payload(text: str) -> object:
    """Decode a completion that is supposed to be exactly one JSON literal."""
    candidate = text.strip()
    fenced = _CODE_FENCE.fullmatch(candidate)
    if fenced:
        candidate = fenced.group(1).strip()
    try:
        return json.loads(candidate)
    except json.JSONDecodeError as e:
        raise MalformedResponseError(
            f"Completion is not valid JSON: {e}", payload=text
        ) from e


class ModelGateway:
    """Sends the three request intents to a chat-completion endpoint.

    Every call is a single attempt: the credential is checked, one request is
    made, and the reply is validated into typed records or rejected whole.
    """

    def __init__(self, config: GatewayConfig):
        self.config = config

    async def _call_anthropic(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        image_b64: str | None = None,
        media_type: str = "image/jpeg",
    ) -> str | None:
        client = anthropic.AsyncAnthropic(
            api_key=self.config.api_key,
            timeout=self.config.timeout_seconds,
            max_retries=0,
        )
        content: list[dict] = []
        if image_b64:
            content.append(
                {
                    "type": "image",
                    "source": {
                        "type": "base64",
                        "media_type": media_type,
                        "data": image_b64,
                    },
                }
            )
        content.append({"type": "text", "text": prompt})
        message = await client.messages.create(
            model=model,
            max_tokens=max_tokens,
            temperature=temperature,
            messages=[{"role": "user", "content": content}],
        )
        if not message.content:
            return None
        return getattr(message.content[0], "text", None)

    async def _call_openai(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        image_b64: str | None = None,
        media_type: str = "image/jpeg",
    ) -> str | None:
        kwargs: dict = {"api_key": self.config.api_key}
        if self.config.base_url:
            kwargs["base_url"] = self.config.base_url
        client = openai.AsyncOpenAI(
            timeout=self.config.timeout_seconds, max_retries=0, **kwargs
        )
        if image_b64:
            content: str | list[dict] = [
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{media_type};base64,{image_b64}"},
                },
                {"type": "text", "text": prompt},
            ]
        else:
            content = prompt
        response = await client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": content}],
            temperature=temperature,
            max_tokens=max_tokens,
        )
        if not response.choices:
            return None
        return response.choices[0].message.content

    async def _complete(
        self,
        model: str,
        prompt: str,
        temperature: float,
        max_tokens: int,
        image_b64: str | None = None,
        media_type: str = "image/jpeg",
    ) -> str:
        provider = self.config.provider
        logger.debug(
            "Completion request: provider=%s model=%s credential_present=%s",
            provider,
            model,
            bool(self.config.api_key),
        )
        if not self.config.api_key:
            raise ConfigurationError(
                "No model API key configured. Set VOCABLENS_LLM_API_KEY and restart."
            )
        if provider not in PROVIDERS:
            raise ConfigurationError(f"Unknown LLM provider: {provider!r}")

        call = self._call_anthropic if provider == "anthropic" else self._call_openai
        try:
            text = await call(model, prompt, temperature, max_tokens, image_b64, media_type)
        except (openai.APIStatusError, anthropic.APIStatusError) as e:
            body = e.response.text
            logger.warning("Model API returned status %s", e.status_code)
            raise UpstreamError(
                f"Model API error: {e.status_code} - {body}",
                status_code=e.status_code,
                body=body,
            ) from e
        except (openai.APIConnectionError, anthropic.APIConnectionError) as e:
            # Timeouts are a subclass of the connection error in both SDKs.
            logger.warning("Model API unreachable: %s", type(e).__name__)
            raise UpstreamError(f"Model API unreachable: {e}") from e

        if not text or not text.strip():
            raise MalformedResponseError("No content in response", payload=text)
        return text

    async def extract_vocabulary(
        self, image_bytes: bytes, media_type: str = "image/jpeg"
    ) -> list[VocabularySuggestion]:
        if not image_bytes:
            raise ValueError("image_bytes must not be empty")
        image_b64 = base64.b64encode(image_bytes).decode("utf-8")
        prompt = (
            "Analyze this image and identify the main object. Then provide exactly 3 "
            "English vocabulary words related to this object at different difficulty "
            "levels (beginner, intermediate, advanced). For each word, create a natural "
            "example sentence AND 3 conversation starters that someone could actually "
            "use in real life when talking about this object.\n\n"
            "Return ONLY a valid JSON array in this exact format, no other text:\n"
            "[\n"
            '  {"word": "word1", "level": "beginner", "sentence": "example sentence", '
            '"conversationStarters": ["starter1", "starter2", "starter3"]},\n'
            '  {"word": "word2", "level": "intermediate", "sentence": "example sentence", '
            '"conversationStarters": ["starter1", "starter2", "starter3"]},\n'
            '  {"word": "word3", "level": "advanced", "sentence": "example sentence", '
            '"conversationStarters": ["starter1", "starter2", "starter3"]}\n'
            "]"
        )
        text = await self._complete(
            self.config.extraction_model,
            prompt,
            temperature=0.7,
            max_tokens=500,
            image_b64=image_b64,
            media_type=media_type,
        )
        data = parse_json_payload(text)
        if not isinstance(data, list) or len(data) != 3:
            raise MalformedResponseError(
                "Expected a JSON array of exactly 3 suggestions", payload=text
            )
        try:
            suggestions = _suggestions_adapter.validate_python(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Suggestion does not match the expected shape: {e}", payload=text
            ) from e
        if {s.level for s in suggestions} != set(Level):
            raise MalformedResponseError(
                "Expected one suggestion per difficulty level", payload=text
            )
        return suggestions

    async def predict_responses(self, starter: str) -> list[ConversationFlow]:
        if not starter or not starter.strip():
            raise ValueError("starter must not be empty")
        prompt = (
            f'Someone says: "{starter}"\n\n'
            "Predict 3 likely responses they might get, and for each response, "
            "suggest a natural follow-up reply.\n\n"
            "Return ONLY a valid JSON array in this exact format, no other text:\n"
            "[\n"
            '  {"theirResponse": "response1", "yourFollowUp": "follow-up1"},\n'
            '  {"theirResponse": "response2", "yourFollowUp": "follow-up2"},\n'
            '  {"theirResponse": "response3", "yourFollowUp": "follow-up3"}\n'
            "]"
        )
        text = await self._complete(
            self.config.prediction_model, prompt, temperature=0.8, max_tokens=400
        )
        data = parse_json_payload(text)
        if not isinstance(data, list) or len(data) != 3:
            raise MalformedResponseError(
                "Expected a JSON array of exactly 3 conversation flows", payload=text
            )
        try:
            return _flows_adapter.validate_python(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Conversation flow does not match the expected shape: {e}",
                payload=text,
            ) from e

    async def correct_sentence(self, text: str) -> MistakeFix:
        if not text or not text.strip():
            raise ValueError("text must not be empty")
        prompt = (
            f'The user wants to say: "{text}"\n\n'
            "If there are grammar mistakes, awkward phrasing, or unnatural English, "
            "rewrite it to sound fluent and natural. Then explain what was wrong and "
            "why your version is better. If it's already perfect, return it unchanged "
            "and say so in the explanation.\n\n"
            "Return ONLY a valid JSON object in this exact format, no other text:\n"
            f'{{"original": {json.dumps(text)}, '
            '"corrected": "corrected version or same if perfect", '
            '"explanation": "brief explanation of changes or \'Perfect! No changes needed.\'"}'
        )
        reply = await self._complete(
            self.config.correction_model, prompt, temperature=0.7, max_tokens=300
        )
        data = parse_json_payload(reply)
        if not isinstance(data, dict):
            raise MalformedResponseError("Expected a single JSON object", payload=reply)
        try:
            fix = MistakeFix.model_validate(data)
        except ValidationError as e:
            raise MalformedResponseError(
                f"Correction does not match the expected shape: {e}", payload=reply
            ) from e
        return fix.model_copy(update={"original": text})
