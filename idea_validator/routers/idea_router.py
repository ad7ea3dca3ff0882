# idea_validator/routers/idea_router.py
import asyncio
import logging

from fastapi import APIRouter, Body, Depends, HTTPException, status
from fastapi.responses import PlainTextResponse
from sqlalchemy.orm import Session

from idea_validator.core.exceptions import AnalysisFailed, PersistenceError, ProductIdeaNotFound, SchemaViolation
from idea_validator.db.database import get_db
from idea_validator.db.repository import ProductIdeaStore
from idea_validator.models.idea_models import (
    ErrorResponse,
    ProductIdeaForm,
    ProductIdeaRecord,
    ProductIdeaSummary,
    ValidateIdeaResponse,
    collect_idea,
)
from idea_validator.services.analysis_service import AnalysisService
from idea_validator.services.gemini_service import GeminiService, get_gemini_service
from idea_validator.services.report_renderer import render_markdown

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/product-ideas", tags=["Product Idea Validation"])

ANALYSIS_FAILED_MESSAGE = "Failed to validate product idea. Please try again."
NOT_SAVED_MESSAGE = ("The product idea was analyzed successfully but the result could not be saved. "
                     "Please try again later.")


def get_analysis_service(provider: GeminiService = Depends(get_gemini_service)) -> AnalysisService:
    return AnalysisService(provider)


def get_store(db: Session = Depends(get_db)) -> ProductIdeaStore:
    return ProductIdeaStore(db)


def _get_record_or_404(store: ProductIdeaStore, idea_id: str) -> ProductIdeaRecord:
    try:
        return store.get(idea_id)
    except ProductIdeaNotFound:
        logger.info(f"IdeaRouter: Product idea '{idea_id}' not found.")
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Product idea not found")
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.post(
    "/validate",
    response_model=ValidateIdeaResponse,
    summary="Validate a product idea (using Google Gemini AI)",
    description=(
        "Accepts a product title, description and optional target market, asks Gemini for a structured "
        "validation report (users, pain points, features, risks, metrics, market, score and recommendation), "
        "stores it and returns it together with the new idea id."
    ),
    responses={
        status.HTTP_422_UNPROCESSABLE_ENTITY: {"model": ErrorResponse, "description": "Missing fields, or a blank title or description shorter than 10 characters."},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorResponse, "description": "Analysis succeeded but could not be saved."},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse, "description": "AI analysis failed or returned an invalid report. Safe to retry."},
    },
)
async def validate_product_idea(
    form: ProductIdeaForm = Body(
        ...,
        examples=[
            {
                "title": "CraftLink",
                "description": "A mobile application that connects local artisans with buyers interested in unique, handmade crafts.",
                "targetMarket": "Urban millennials who value sustainable, handmade goods",
            }
        ],
    ),
    analysis: AnalysisService = Depends(get_analysis_service),
    store: ProductIdeaStore = Depends(get_store),
):
    # Raises InputValidationError (422) before anything reaches the model provider
    idea = collect_idea(form.title, form.description, form.target_market)
    logger.info(f"IdeaRouter: Received validation request. Title='{idea.title[:70]}', "
                f"TargetMarket='{idea.target_market or '-'}'")
    try:
        report = await analysis.submit(idea.title, idea.description, idea.target_market)
    except SchemaViolation as e:
        logger.warning(f"IdeaRouter: Discarding non-conforming analysis. {e.to_dict()}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=ANALYSIS_FAILED_MESSAGE)
    except AnalysisFailed as e:
        logger.error(f"IdeaRouter: Analysis failed. Error: {e.message}")
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=ANALYSIS_FAILED_MESSAGE)

    try:
        record = await asyncio.to_thread(store.create, idea, report)
    except PersistenceError as e:
        logger.error(f"IdeaRouter: Analysis for '{idea.title[:70]}' completed but was not saved. Error: {e.message}")
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=NOT_SAVED_MESSAGE)

    return ValidateIdeaResponse(id=record.id, validation=record.validation)


@router.get(
    "",
    response_model=list[ProductIdeaSummary],
    summary="List validated product ideas, newest first",
)
def list_product_ideas(store: ProductIdeaStore = Depends(get_store)):
    try:
        return store.list_all()
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message)


@router.get(
    "/{idea_id}",
    response_model=ProductIdeaRecord,
    summary="Get a product idea with its full validation report",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "No idea with this id."}},
)
def get_product_idea(idea_id: str, store: ProductIdeaStore = Depends(get_store)):
    return _get_record_or_404(store, idea_id)


@router.get(
    "/{idea_id}/report",
    response_class=PlainTextResponse,
    summary="Render a product idea's validation report as Markdown",
    responses={status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "No idea with this id."}},
)
def get_product_idea_report(idea_id: str, store: ProductIdeaStore = Depends(get_store)):
    record = _get_record_or_404(store, idea_id)
    return PlainTextResponse(render_markdown(record), media_type="text/markdown")
