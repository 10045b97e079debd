"""Quote response models for SmartQuote.

Pydantic models for the structured quote returned by the generator.
Wire names are camelCase; attributes are snake_case with aliases.
"""

from typing import Dict, Any, Optional, List
from pydantic import BaseModel, Field


class QuoteBreakdownItem(BaseModel):
    """One category/cost/description line of a quote."""

    category: str = Field(
        description="e.g., Backend Development, Frontend, UX/UI, DevOps, Management"
    )
    cost: float = Field(ge=0, description="Cost for this category in USD")
    description: str = Field(description="What the category covers")


class MarketComparison(BaseModel):
    """Market benchmark for similar projects."""

    low_estimate: float = Field(
        alias="lowEstimate",
        ge=0,
        description="Low market price for something similar."
    )
    high_estimate: float = Field(
        alias="highEstimate",
        ge=0,
        description="High market price (top agencies)."
    )
    average_days: float = Field(
        alias="averageDays",
        ge=0,
        description="Average development days in the market."
    )
    market_trend: str = Field(
        alias="marketTrend",
        description="Short note on how this kind of software is currently priced."
    )

    class Config:
        populate_by_name = True


class QuoteResponse(BaseModel):
    """Structured quote produced by the external generator."""

    project_title: str = Field(alias="projectTitle")
    executive_summary: str = Field(
        alias="executiveSummary",
        description="A professional summary for the client explaining the scope."
    )
    total_estimated_cost: float = Field(
        alias="totalEstimatedCost",
        ge=0,
        description="Total calculated cost of the complete project."
    )
    mvp_cost: float = Field(
        alias="mvpCost",
        ge=0,
        description="Reduced cost for a Minimum Viable Product."
    )
    infrastructure_critical_cost: float = Field(
        alias="infrastructureCriticalCost",
        ge=0,
        description="Servers, licenses and cloud services needed to launch."
    )
    breakdown: List[QuoteBreakdownItem] = Field(
        description="Cost broken down by category"
    )
    market_comparison: MarketComparison = Field(alias="marketComparison")
    technical_recommendations: List[str] = Field(alias="technicalRecommendations")
    client_email_draft: str = Field(
        alias="clientEmailDraft",
        description="A formal email draft to send the quote to the client."
    )

    class Config:
        populate_by_name = True

    def breakdown_total(self) -> float:
        """Sum of all breakdown line items."""
        return sum(item.cost for item in self.breakdown)

    def breakdown_mismatch(self, tolerance: float = 1.0) -> Optional[float]:
        """Difference between breakdown sum and total, if beyond tolerance.

        The generator is asked to make the breakdown add up to the total but
        nothing guarantees it.

        Returns:
            Absolute difference, or None when within tolerance.
        """
        difference = abs(self.breakdown_total() - self.total_estimated_cost)
        return difference if difference > tolerance else None

    def to_wire_dict(self) -> Dict[str, Any]:
        """Serialize using the camelCase wire names."""
        return self.model_dump(by_alias=True)


# JSON type names for the declared response shape
_JSON_TYPES = {str: "string", float: "number", int: "integer"}


def _object_schema(model: type) -> Dict[str, Any]:
    properties: Dict[str, Any] = {}
    required: List[str] = []
    for name, info in model.model_fields.items():
        key = info.alias or name
        annotation = info.annotation
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            prop = _object_schema(annotation)
        elif getattr(annotation, "__origin__", None) in (list, List):
            (item_type,) = annotation.__args__
            if isinstance(item_type, type) and issubclass(item_type, BaseModel):
                items = _object_schema(item_type)
            else:
                items = {"type": _JSON_TYPES[item_type]}
            prop = {"type": "array", "items": items}
        else:
            prop = {"type": _JSON_TYPES[annotation]}
        if info.description:
            prop["description"] = info.description
        properties[key] = prop
        if info.is_required():
            required.append(key)
    return {"type": "object", "properties": properties, "required": required}


def response_schema() -> Dict[str, Any]:
    """Declared JSON shape sent to the generator.

    Field names, types, required lists and per-field hints, derived from
    QuoteResponse.
    """
    return _object_schema(QuoteResponse)
