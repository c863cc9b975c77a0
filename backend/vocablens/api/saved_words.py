import logging

from fastapi import APIRouter, Depends, HTTPException, Response, status

from vocablens.api.errors import to_http_error
from vocablens.dependencies import get_word_store
from vocablens.errors import PersistenceError
from vocablens.schemas.saved_words import ExistsResponse, SavedWord, SavedWordCreate
from vocablens.services.word_store import WordStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/saved-words", tags=["saved-words"])


@router.get("", response_model=list[SavedWord])
async def list_saved_words(store: WordStore = Depends(get_word_store)):
    return await store.list_words()


@router.post("", response_model=SavedWord, status_code=status.HTTP_201_CREATED)
async def save_word(body: SavedWordCreate, store: WordStore = Depends(get_word_store)):
    try:
        result = await store.save(body.word, body.level, body.sentence)
    except PersistenceError as e:
        logger.exception("Saving word failed")
        raise to_http_error(e, "Saving the word")
    if not result.saved:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "message": f"'{body.word}' is already saved",
                "existing": result.word.model_dump(mode="json", by_alias=True),
            },
        )
    return result.word


@router.get("/exists", response_model=ExistsResponse)
async def word_exists(word: str, store: WordStore = Depends(get_word_store)):
    return ExistsResponse(exists=await store.exists(word))


@router.delete("/{word_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_word(word_id: str, store: WordStore = Depends(get_word_store)):
    try:
        await store.remove(word_id)
    except PersistenceError as e:
        logger.exception("Removing word failed")
        raise to_http_error(e, "Removing the word")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
