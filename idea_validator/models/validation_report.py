# idea_validator/models/validation_report.py
"""
Structured validation report returned by the model provider.

The same models serve as the response schema sent to Gemini and as the
validator applied to whatever comes back. JSON keys are camelCase; attributes
are snake_case.
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

Severity = Literal["low", "medium", "high", "critical"]
Frequency = Literal["rare", "occasional", "frequent", "constant"]
FeaturePriority = Literal["must-have", "should-have", "nice-to-have"]
Level = Literal["low", "medium", "high"]  # complexity, probability, impact, step priority
Recommendation = Literal["proceed", "proceed-with-caution", "pivot-needed", "stop"]


class ReportModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True, # Reports are never mutated after creation
    )


# --- User analysis ---
class UserPersona(ReportModel):
    name: str
    demographics: str
    pain_points: list[str]
    goals: list[str]


class UserAnalysis(ReportModel):
    target_users: list[str] = Field(..., description="Primary target user segments")
    user_personas: list[UserPersona] = Field(..., description="Detailed user personas")
    user_journey: list[str] = Field(..., description="Key steps in user journey")


# --- Pain points ---
class Problem(ReportModel):
    problem: str
    severity: Severity
    frequency: Frequency
    current_solutions: list[str]


class PainPoints(ReportModel):
    primary_problems: list[Problem]
    market_gap: str = Field(..., description="What gap exists in current market solutions")


# --- Features ---
class Feature(ReportModel):
    name: str
    description: str
    priority: FeaturePriority
    complexity: Level
    user_value: str


class Features(ReportModel):
    core_features: list[Feature]
    mvp_features: list[str] = Field(..., description="Minimum viable product features")
    future_features: list[str] = Field(..., description="Features for later iterations")


# --- Risks ---
class RiskItem(ReportModel):
    risk: str
    probability: Level
    impact: Level
    mitigation: str


class Risks(ReportModel):
    technical_risks: list[RiskItem]
    market_risks: list[RiskItem]
    business_risks: list[RiskItem]


# --- Metrics ---
class SuccessMetric(ReportModel):
    metric: str
    target: str
    timeframe: str
    measurement: str


class Metrics(ReportModel):
    success_metrics: list[SuccessMetric]
    kpis: list[str] = Field(..., description="Key Performance Indicators")
    validation_metrics: list[str] = Field(..., description="Metrics to validate product-market fit")


# --- Market analysis ---
class MarketSize(ReportModel):
    tam: str = Field(..., description="Total Addressable Market")
    sam: str = Field(..., description="Serviceable Addressable Market")
    som: str = Field(..., description="Serviceable Obtainable Market")


class Competitor(ReportModel):
    competitor: str
    strengths: list[str]
    weaknesses: list[str]
    differentiation: str


class MarketAnalysis(ReportModel):
    market_size: MarketSize
    competition: list[Competitor]
    validation_steps: list[str] = Field(..., description="Steps to validate market demand")


# --- Next steps ---
class NextStep(ReportModel):
    step: str
    priority: Level
    timeframe: str
    resources: str


class ValidationReport(ReportModel):
    """Full analysis of one product idea."""
    user_analysis: UserAnalysis
    pain_points: PainPoints
    features: Features
    risks: Risks
    metrics: Metrics
    market_analysis: MarketAnalysis
    # strict: a numeric string like "7" is a contract violation, not a score
    viability_score: float = Field(..., ge=1, le=10, strict=True, description="Overall viability score from 1-10")
    recommendation: Recommendation = Field(..., description="Overall recommendation")
    reasoning: str = Field(..., description="Detailed reasoning for the recommendation")
    next_steps: list[NextStep]

    def to_json_dict(self) -> dict:
        """camelCase, JSON-safe representation used on the wire and in storage."""
        return self.model_dump(mode="json", by_alias=True)


# Keys the Gemini response_schema accepts; everything else pydantic emits is dropped.
_GEMINI_SCHEMA_KEYS = {"type", "format", "description", "nullable", "enum", "items", "properties", "required"}


def _inline_refs(node, defs: dict):
    if isinstance(node, dict):
        if "$ref" in node:
            return _inline_refs(defs[node["$ref"].rsplit("/", 1)[-1]], defs)
        converted = {}
        for key, value in node.items():
            if key == "properties":
                converted[key] = {name: _inline_refs(prop, defs) for name, prop in value.items()}
            elif key in _GEMINI_SCHEMA_KEYS:
                converted[key] = _inline_refs(value, defs)
        if "enum" in converted:
            converted.setdefault("type", "string")
            converted["format"] = "enum"
        return converted
    if isinstance(node, list):
        return [_inline_refs(item, defs) for item in node]
    return node


def gemini_response_schema(model: type[BaseModel] = ValidationReport) -> dict:
    """
    Converts a pydantic model's JSON schema into the OpenAPI subset accepted by
    Gemini's ``response_schema``: no ``$ref``/``$defs``, no titles, no bounds.
    Numeric bounds and enums are still enforced by the model on the way back.
    """
    schema = model.model_json_schema(by_alias=True)
    defs = schema.pop("$defs", {})
    return _inline_refs(schema, defs)
