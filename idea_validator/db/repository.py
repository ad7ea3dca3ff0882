# idea_validator/db/repository.py
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from idea_validator.core.exceptions import PersistenceError, ProductIdeaNotFound
from idea_validator.db.models import IdeaValidation, ProductIdea, utc_now
from idea_validator.models.idea_models import ProductIdeaInput, ProductIdeaRecord, ProductIdeaSummary
from idea_validator.models.validation_report import ValidationReport

logger = logging.getLogger(__name__)


class ProductIdeaStore:
    """
    Persistence for product ideas and their validation reports.
    One idea row and one validation row per submission; rows are never updated.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now):
        self.db = db
        self.clock = clock

    def create(self, idea: ProductIdeaInput, report: ValidationReport) -> ProductIdeaRecord:
        created_at = self.clock()
        data = report.to_json_dict()
        row = ProductIdea(
            title=idea.title,
            description=idea.description,
            target_market=idea.target_market,
            created_at=created_at,
            validation=IdeaValidation(
                user_analysis=data["userAnalysis"],
                pain_points=data["painPoints"],
                features=data["features"],
                risks=data["risks"],
                metrics=data["metrics"],
                market_analysis=data["marketAnalysis"],
                viability_score=report.viability_score,
                recommendation=report.recommendation,
                reasoning=report.reasoning,
                next_steps=data["nextSteps"],
                created_at=created_at,
            ),
        )
        try:
            self.db.add(row)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"ProductIdeaStore: Failed to store idea '{idea.title[:70]}'. Error: {e}", exc_info=True)
            raise PersistenceError("Could not save the product idea validation.", component="store") from e

        logger.info(f"ProductIdeaStore: Stored idea '{row.id}' (score={report.viability_score}, "
                    f"recommendation={report.recommendation}).")
        return ProductIdeaRecord(
            id=row.id,
            title=row.title,
            description=row.description,
            target_market=row.target_market,
            created_at=created_at,
            validation=report,
        )

    def find_by_id(self, idea_id: str) -> Optional[ProductIdeaRecord]:
        try:
            row = self.db.execute(select(ProductIdea).where(ProductIdea.id == idea_id)).scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"ProductIdeaStore: Failed to load idea '{idea_id}'. Error: {e}", exc_info=True)
            raise PersistenceError("Could not load the product idea.", component="store") from e

        if row is None or row.validation is None:
            return None
        return ProductIdeaRecord(
            id=row.id,
            title=row.title,
            description=row.description,
            target_market=row.target_market,
            created_at=row.created_at,
            validation=_to_report(row.validation),
        )

    def get(self, idea_id: str) -> ProductIdeaRecord:
        """Like find_by_id, but a missing idea raises ProductIdeaNotFound."""
        record = self.find_by_id(idea_id)
        if record is None:
            raise ProductIdeaNotFound(f"Product idea '{idea_id}' not found", component="store",
                                      details={"id": idea_id})
        return record

    def list_all(self) -> list[ProductIdeaSummary]:
        """Summaries of every stored idea, newest first; equal timestamps in reverse insertion order."""
        stmt = (
            select(ProductIdea, IdeaValidation)
            .join(IdeaValidation, IdeaValidation.product_idea_id == ProductIdea.id)
            .order_by(ProductIdea.created_at.desc(), ProductIdea.seq.desc())
        )
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            logger.error(f"ProductIdeaStore: Failed to list ideas. Error: {e}", exc_info=True)
            raise PersistenceError("Could not list product ideas.", component="store") from e

        return [
            ProductIdeaSummary(
                id=idea.id,
                title=idea.title,
                viability_score=validation.viability_score,
                recommendation=validation.recommendation,
                created_at=idea.created_at,
            )
            for idea, validation in rows
        ]


def _to_report(row: IdeaValidation) -> ValidationReport:
    return ValidationReport.model_validate({
        "userAnalysis": row.user_analysis,
        "painPoints": row.pain_points,
        "features": row.features,
        "risks": row.risks,
        "metrics": row.metrics,
        "marketAnalysis": row.market_analysis,
        "viabilityScore": row.viability_score,
        "recommendation": row.recommendation,
        "reasoning": row.reasoning,
        "nextSteps": row.next_steps,
    })
