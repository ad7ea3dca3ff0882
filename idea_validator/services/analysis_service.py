# idea_validator/services/analysis_service.py
import logging
from typing import Any, Optional, Protocol

from pydantic import ValidationError

from idea_validator.core.exceptions import SchemaViolation
from idea_validator.models.validation_report import ValidationReport, gemini_response_schema

logger = logging.getLogger(__name__)


class ModelProvider(Protocol):
    async def generate_structured(self, prompt: str, response_schema: dict[str, Any]) -> dict[str, Any]:
        ...


class AnalysisService:
    """
    Sends a product idea to the model provider and enforces the report contract
    on the way back. Provider errors propagate as AnalysisFailed; a reply that
    does not satisfy ValidationReport becomes SchemaViolation.
    """

    def __init__(self, provider: ModelProvider):
        self.provider = provider
        self.response_schema = gemini_response_schema(ValidationReport)

    async def submit(self, title: str, description: str, target_market: Optional[str] = None) -> ValidationReport:
        prompt = build_prompt(title, description, target_market)
        logger.info(f"AnalysisService: Submitting idea '{title[:70]}' for analysis.")
        payload = await self.provider.generate_structured(prompt, self.response_schema)
        return parse_report(payload)


def build_prompt(title: str, description: str, target_market: Optional[str] = None) -> str:
    market_line = f"Target Market: {target_market}\n" if target_market else ""
    return (
        f"As an expert AI Product Manager, analyze this product idea and provide a comprehensive validation assessment:\n\n"
        f"Title: {title}\n"
        f"Description: {description}\n"
        f"{market_line}\n"
        f"Provide a thorough analysis covering:\n"
        f"1. User Analysis - Who are the target users, their personas, and journey\n"
        f"2. Pain Points - What problems does this solve and how severe are they\n"
        f"3. Features - Core features, MVP scope, and future roadmap\n"
        f"4. Risks - Technical, market, and business risks with mitigation strategies\n"
        f"5. Metrics - Success metrics, KPIs, and validation approaches\n"
        f"6. Market Analysis - Market size, competition, and validation steps\n\n"
        f"Finish with an overall viability score between 1 and 10, a recommendation "
        f"(proceed, proceed-with-caution, pivot-needed or stop), the reasoning behind it, "
        f"and prioritized next steps.\n\n"
        f"Be specific, actionable, and honest in your assessment. Consider both opportunities and challenges."
    )


def parse_report(payload: dict[str, Any]) -> ValidationReport:
    """Validates a provider payload against the report contract without coercing it."""
    try:
        return ValidationReport.model_validate(payload)
    except ValidationError as e:
        locations = [".".join(str(part) for part in err["loc"]) for err in e.errors()]
        logger.warning(f"AnalysisService: Provider response violates report schema at {locations}.")
        raise SchemaViolation(
            "AI service returned an analysis that does not match the expected report format.",
            component="analysis",
            details={"errors": [
                {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in e.errors()
            ]},
        ) from e
