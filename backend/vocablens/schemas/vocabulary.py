import enum

from pydantic import BaseModel, Field


class Level(str, enum.Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class VocabularySuggestion(BaseModel):
    word: str = Field(min_length=1)
    level: Level
    sentence: str = Field(min_length=1)
    conversation_starters: list[str] = Field(
        default_factory=list, max_length=3, alias="conversationStarters"
    )

    model_config = {"populate_by_name": True}


class ConversationFlow(BaseModel):
    their_response: str = Field(min_length=1, alias="theirResponse")
    your_follow_up: str = Field(min_length=1, alias="yourFollowUp")

    model_config = {"populate_by_name": True}


class MistakeFix(BaseModel):
    original: str
    corrected: str = Field(min_length=1)
    explanation: str = Field(min_length=1)


class VocabularyResponse(BaseModel):
    suggestions: list[VocabularySuggestion]


class PredictRequest(BaseModel):
    starter: str = Field(min_length=1)


class PredictResponse(BaseModel):
    flows: list[ConversationFlow]


class CorrectionRequest(BaseModel):
    text: str = Field(min_length=1)
