import logging

from fastapi import APIRouter, Depends, HTTPException, status

from vocablens.api.errors import to_http_error
from vocablens.dependencies import get_gateway
from vocablens.errors import VocabLensError
from vocablens.schemas.vocabulary import (
    CorrectionRequest,
    MistakeFix,
    PredictRequest,
    PredictResponse,
)
from vocablens.services.llm_service import ModelGateway

logger = logging.getLogger(__name__)

router = APIRouter(tags=["practice"])


@router.post("/conversation/predict", response_model=PredictResponse)
async def predict_conversation(
    body: PredictRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    try:
        flows = await gateway.predict_responses(body.starter)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except VocabLensError as e:
        logger.exception("Conversation prediction failed")
        raise to_http_error(e, "Conversation prediction")
    return PredictResponse(flows=flows)


@router.post("/corrections", response_model=MistakeFix)
async def correct_sentence(
    body: CorrectionRequest,
    gateway: ModelGateway = Depends(get_gateway),
):
    try:
        return await gateway.correct_sentence(body.text)
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(e))
    except VocabLensError as e:
        logger.exception("Sentence correction failed")
        raise to_http_error(e, "Sentence correction")
