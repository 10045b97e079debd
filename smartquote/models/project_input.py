"""Project input models for SmartQuote.

Pydantic model for the parameters a user fills in before requesting a quote.
Numeric fields may arrive as text and are coerced at submission time.
"""

import re
from enum import Enum
from typing import Dict, Any, Optional, List, Union
from pydantic import BaseModel, Field

from smartquote.config.errors import ValidationError, ErrorCode


NumberLike = Union[int, float, str]


class ProjectType(str, Enum):
    """Project types offered by the quote form."""

    WEB_APP = "Web App / SaaS"
    CORPORATE_SITE = "Sitio Web Corporativo"
    MOBILE_APP = "App Móvil (iOS/Android)"
    ECOMMERCE = "E-commerce / Tienda"
    API_BACKEND = "API / Backend System"


# Required form fields, in the order the form shows them
REQUIRED_FIELDS = [
    "project_name",
    "description",
    "team_size",
    "hourly_rate",
    "hours_per_day",
    "estimated_weeks",
    "server_cost",
]

# (minimum, maximum) per numeric field, from the form's input constraints
NUMERIC_BOUNDS = {
    "team_size": (1, None),
    "hourly_rate": (10, None),
    "hours_per_day": (1, 12),
    "estimated_weeks": (1, None),
    "server_cost": (0, None),
}

# Commas are only accepted as thousands separators ("1,500"), never as a decimal mark
THOUSANDS_PATTERN = re.compile(r"^\d{1,3}(,\d{3})+(\.\d+)?$")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_number(value: NumberLike, field_name: str) -> Optional[float]:
    """Coerce a form value to a number.

    Blank values coerce to None. Integral floats are returned as ints so
    they read naturally in the prompt ("2 people", not "2.0 people").

    Raises:
        ValidationError: If the value is not numeric.
    """
    if _is_blank(value):
        return None
    if isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be a number",
            fields=[field_name],
            code=ErrorCode.INVALID_FIELD,
        )
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip()
        if "," in text:
            if not THOUSANDS_PATTERN.match(text):
                raise ValidationError(
                    f"{field_name} must use a period for decimals, got {value!r}",
                    fields=[field_name],
                    code=ErrorCode.INVALID_FIELD,
                )
            text = text.replace(",", "")
        try:
            number = float(text)
        except ValueError:
            raise ValidationError(
                f"{field_name} must be a number, got {value!r}",
                fields=[field_name],
                code=ErrorCode.INVALID_FIELD,
            )
    if number != number or number in (float("inf"), float("-inf")):
        raise ValidationError(
            f"{field_name} must be a finite number",
            fields=[field_name],
            code=ErrorCode.INVALID_FIELD,
        )
    return int(number) if number.is_integer() else number


class ProjectInput(BaseModel):
    """Parameters describing the project to quote."""

    project_name: str = Field(
        default="",
        alias="projectName",
        description="Project name shown on the quote"
    )
    project_type: str = Field(
        default=ProjectType.WEB_APP.value,
        alias="projectType",
        description="One of the ProjectType values"
    )
    description: str = Field(
        default="",
        description="Key features, users and integrations"
    )
    team_size: NumberLike = Field(
        default=2,
        alias="teamSize",
        description="Number of people on the team"
    )
    hourly_rate: NumberLike = Field(
        default=35,
        alias="hourlyRate",
        description="Blended hourly rate in USD"
    )
    hours_per_day: NumberLike = Field(
        default=6,
        alias="hoursPerDay",
        description="Working hours per day"
    )
    estimated_weeks: NumberLike = Field(
        default=8,
        alias="estimatedWeeks",
        description="Estimated duration in weeks"
    )
    server_cost: NumberLike = Field(
        default=50,
        alias="serverCost",
        description="Monthly server/cloud budget in USD"
    )
    target_cost: NumberLike = Field(
        default="",
        alias="targetCost",
        description="Optional manual total that overrides computed pricing"
    )

    class Config:
        populate_by_name = True

    @property
    def target_cost_value(self) -> Optional[float]:
        """Coerced target cost, or None when blank."""
        return coerce_number(self.target_cost, "target_cost")

    @property
    def has_target_cost(self) -> bool:
        """True when a manual target cost greater than zero was supplied."""
        try:
            value = self.target_cost_value
        except ValidationError:
            return False
        return value is not None and value > 0

    def missing_fields(self) -> List[str]:
        """Return required fields that are still empty."""
        return [name for name in REQUIRED_FIELDS if _is_blank(getattr(self, name))]

    def validate_for_submission(self) -> Dict[str, Any]:
        """Check the form can be submitted and return coerced values.

        Returns:
            Dict of field name to coerced value.

        Raises:
            ValidationError: Listing every missing or invalid field.
        """
        missing = self.missing_fields()
        if missing:
            raise ValidationError(
                f"Missing required fields: {', '.join(missing)}",
                fields=missing,
                code=ErrorCode.MISSING_FIELD,
            )

        valid_types = [t.value for t in ProjectType]
        if self.project_type not in valid_types:
            raise ValidationError(
                f"Unknown project type {self.project_type!r}",
                fields=["project_type"],
                code=ErrorCode.INVALID_FIELD,
                details={"allowed": valid_types},
            )

        coerced: Dict[str, Any] = {}
        invalid: List[str] = []
        for name, (low, high) in NUMERIC_BOUNDS.items():
            value = coerce_number(getattr(self, name), name)
            if (low is not None and value < low) or (high is not None and value > high):
                invalid.append(name)
            coerced[name] = value

        target = self.target_cost_value
        if target is not None and target < 0:
            invalid.append("target_cost")
        coerced["target_cost"] = target

        if invalid:
            raise ValidationError(
                f"Values out of range: {', '.join(invalid)}",
                fields=invalid,
                code=ErrorCode.INVALID_FIELD,
                details={"bounds": {k: NUMERIC_BOUNDS.get(k) for k in invalid}},
            )

        coerced["project_name"] = self.project_name.strip()
        coerced["project_type"] = self.project_type
        coerced["description"] = self.description.strip()
        return coerced

    def coerced(self) -> "ProjectInput":
        """Return a copy with numeric fields converted to numbers."""
        return self.model_copy(update=self.validate_for_submission())

    def export_filename(self) -> str:
        """File name for the exported quote document."""
        slug = re.sub(r"\s+", "-", self.project_name).lower()
        return f"cotizacion-{slug}.pdf"
