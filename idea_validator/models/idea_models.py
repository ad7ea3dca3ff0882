# idea_validator/models/idea_models.py
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from idea_validator.core.exceptions import InputValidationError
from idea_validator.models.validation_report import Recommendation, ValidationReport


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductIdeaInput(ApiModel):
    """
    A validated product idea, ready to forward to the analysis.
    """
    title: str = Field(
        ...,
        min_length=1,
        description="Short product title.",
    )
    description: str = Field(
        ...,
        min_length=10,
        description="What the product does and for whom (at least 10 characters).",
    )
    target_market: Optional[str] = Field(
        None,
        description="Optional target market or audience.",
    )

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Title is required")
        return value

    @field_validator("target_market")
    @classmethod
    def blank_market_is_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


class ProductIdeaForm(ApiModel):
    """
    Raw request body for the validation endpoint. Only the field types are
    checked here; the content rules live in ProductIdeaInput via collect_idea.
    """
    title: str = Field(..., description="Product title (required, non-blank).")
    description: str = Field(..., description="What the product does and for whom (at least 10 characters).")
    target_market: Optional[str] = Field(None, description="Optional target market or audience.")


def collect_idea(title: str, description: str, target_market: Optional[str] = None) -> ProductIdeaInput:
    """Validates raw form fields, raising InputValidationError with field-level messages."""
    try:
        return ProductIdeaInput(title=title, description=description, target_market=target_market)
    except ValidationError as e:
        raise InputValidationError(
            [{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in e.errors()]
        ) from e


class ValidateIdeaResponse(ApiModel):
    id: str
    validation: ValidationReport


class ProductIdeaRecord(ApiModel):
    """A stored idea together with its validation report."""
    id: str
    title: str
    description: str
    target_market: Optional[str] = None
    created_at: datetime
    validation: ValidationReport


class ProductIdeaSummary(ApiModel):
    id: str
    title: str
    viability_score: float
    recommendation: Recommendation
    created_at: datetime


class ErrorDetail(BaseModel):
    """
    Standard detail structure for validation errors or specific field errors.
    """
    loc: list[str | int] | None = None # Location of the error (e.g. ['body', 'title'])
    msg: str
    type: str | None = None


class ErrorResponse(BaseModel):
    """
    Standard error response model for the API.
    """
    detail: str | list[ErrorDetail] | dict[str, Any]
