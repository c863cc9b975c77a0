import enum
from datetime import datetime

from pydantic import BaseModel, Field

from vocablens.schemas.vocabulary import Level


class SavedWord(BaseModel):
    id: str
    word: str
    level: Level
    sentence: str
    saved_at: datetime = Field(alias="savedAt")

    model_config = {"populate_by_name": True, "frozen": True}


class SaveStatus(str, enum.Enum):
    SAVED = "saved"
    ALREADY_SAVED = "already_saved"


class SaveResult(BaseModel):
    status: SaveStatus
    word: SavedWord  # the new entry, or the existing one that matched

    @property
    def saved(self) -> bool:
        return self.status == SaveStatus.SAVED


class SavedWordCreate(BaseModel):
    word: str = Field(min_length=1)
    level: Level
    sentence: str = ""


class ExistsResponse(BaseModel):
    exists: bool
