# idea_validator/core/exceptions.py
from typing import Any, Optional


class IdeaValidatorError(Exception):
    """Base exception for all application errors."""

    def __init__(
        self,
        message: str,
        component: str = "unknown",
        details: Optional[dict[str, Any]] = None,
    ):
        self.message = message
        self.component = component
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": self.message,
            "component": self.component,
            "details": self.details,
        }


# Intake
class InputValidationError(IdeaValidatorError):
    """Field-level input problems. Never forwarded to the model provider."""

    def __init__(self, errors: list[dict[str, Any]]):
        self.errors = errors
        fields = ", ".join(str(err["loc"][-1]) for err in errors if err.get("loc"))
        super().__init__(f"Invalid product idea input: {fields or 'unknown field'}", component="intake")


# Analysis
class AnalysisFailed(IdeaValidatorError):
    """The model provider was unreachable, failed, or returned unusable output."""


class SchemaViolation(AnalysisFailed):
    """The model provider replied, but the object breaks the report contract."""


# Persistence
class ProductIdeaNotFound(IdeaValidatorError):
    pass


class PersistenceError(IdeaValidatorError):
    pass
