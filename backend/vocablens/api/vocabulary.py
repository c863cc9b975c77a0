import logging

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from vocablens.api.errors import to_http_error
from vocablens.dependencies import get_gateway
from vocablens.errors import VocabLensError
from vocablens.schemas.vocabulary import VocabularyResponse
from vocablens.services.llm_service import ModelGateway

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/vocabulary", tags=["vocabulary"])


@router.post("", response_model=VocabularyResponse)
async def extract_vocabulary(
    file: UploadFile = File(...),
    gateway: ModelGateway = Depends(get_gateway),
):
    """Three vocabulary suggestions, one per difficulty level, for a captured photo."""
    image_bytes = await file.read()
    if not image_bytes:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Empty image"
        )
    media_type = file.content_type or "image/jpeg"
    try:
        suggestions = await gateway.extract_vocabulary(image_bytes, media_type)
    except VocabLensError as e:
        logger.exception("Image analysis failed")
        raise to_http_error(e, "Image analysis")
    return VocabularyResponse(suggestions=suggestions)
