"""
Pydantic Schemas for Write Requests

These schemas define the validation boundary: request bodies for monthly
progress writes and manual alert creation are checked here before any
evaluation or persistence takes place.
"""

from typing import Optional
from pydantic import BaseModel, Field, ValidationError, field_validator

from .core.entities import AlertType
from .core.months import is_year_month
from .errors import InvalidInputError


# =============================================================================
# Monthly Progress Schemas
# =============================================================================

class MonthlyProgressInput(BaseModel):
    """A new monthly progress entry for a site."""
    site_id: str = Field(
        description="Site the entry belongs to",
        min_length=1
    )
    month: str = Field(
        description="Calendar month of the entry (YYYY-MM)"
    )
    monthly_progress: float = Field(
        description="Progress achieved during the month (percent)",
        ge=0.0,
        le=100.0
    )
    target_rate: float = Field(
        description="Expected cumulative progress per the baseline schedule (percent)",
        ge=0.0,
        le=100.0
    )
    normal_rate: Optional[float] = Field(
        description="Baseline monthly increment; defaults to the configured rate",
        default=None,
        ge=0.0
    )
    observations: Optional[str] = Field(
        description="Free-text annotation",
        default=None
    )

    @field_validator("month")
    @classmethod
    def _check_month(cls, value: str) -> str:
        if not is_year_month(value):
            raise ValueError("month must use the YYYY-MM format")
        return value


class MonthlyProgressUpdate(BaseModel):
    """Changes to an existing monthly entry. Omitted fields are left as is."""
    id: str = Field(
        description="Record to update",
        min_length=1
    )
    monthly_progress: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    target_rate: Optional[float] = Field(default=None, ge=0.0, le=100.0)
    normal_rate: Optional[float] = Field(default=None, ge=0.0)
    observations: Optional[str] = None

    def changes(self) -> dict:
        """Fields explicitly provided by the caller, excluding the id."""
        return {
            name: getattr(self, name)
            for name in self.model_fields_set
            if name != "id"
        }


# =============================================================================
# Alert Schemas
# =============================================================================

class ManualAlertRequest(BaseModel):
    """Operator-created alert."""
    project_id: str = Field(
        description="Project the alert is raised for",
        min_length=1
    )
    site_id: Optional[str] = Field(
        description="Site concerned, if any",
        default=None
    )
    type: AlertType = Field(
        description="Alert category"
    )
    custom_message: Optional[str] = Field(
        description="Message replacing the generated body",
        default=None
    )

    @field_validator("site_id", "custom_message")
    @classmethod
    def _blank_to_none(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value


def parse_request(schema: type[BaseModel], payload) -> BaseModel:
    """Validate a payload, raising InvalidInputError on failure."""
    if isinstance(payload, schema):
        return payload
    if not isinstance(payload, dict):
        raise InvalidInputError(f"Expected a JSON object for {schema.__name__}")
    try:
        return schema.model_validate(payload)
    except ValidationError as e:
        details = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
            for err in e.errors()
        )
        raise InvalidInputError(f"Invalid {schema.__name__}: {details}") from e
