"""
PageSpeed Insights response models.

Only the parts of the v5 `runPagespeed` body the audit reads are modelled.
Every field is optional and the accessors on LighthouseResult state their
default, so a partially populated response still yields a full report.
"""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AuditDetails(BaseModel):
    model_config = ConfigDict(extra="ignore")

    items: Optional[List[Dict[str, Any]]] = None

    @field_validator("items", mode="before")
    @classmethod
    def keep_object_items(cls, v):
        # Entries that are not objects carry nothing the report reads
        if isinstance(v, list):
            return [item for item in v if isinstance(item, dict)]
        return v


class LighthouseAudit(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    numeric_value: Optional[float] = Field(default=None, alias="numericValue")
    details: Optional[AuditDetails] = None


class LighthouseCategory(BaseModel):
    model_config = ConfigDict(extra="ignore")

    score: Optional[float] = None


class LighthouseResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    audits: Dict[str, Optional[LighthouseAudit]] = Field(default_factory=dict)
    categories: Dict[str, Optional[LighthouseCategory]] = Field(default_factory=dict)

    @field_validator("audits", "categories", mode="before")
    @classmethod
    def null_section_is_empty(cls, v):
        return {} if v is None else v

    def numeric_value(self, audit_id: str) -> float:
        """`numericValue` of an audit; 0 when the audit or the value is missing."""
        audit = self.audits.get(audit_id)
        if audit is None or audit.numeric_value is None:
            return 0.0
        return audit.numeric_value

    def items(self, audit_id: str) -> List[Dict[str, Any]]:
        """`details.items` of an audit; empty list when missing."""
        audit = self.audits.get(audit_id)
        if audit is None or audit.details is None or audit.details.items is None:
            return []
        return audit.details.items

    def first_item(self, audit_id: str) -> Optional[Dict[str, Any]]:
        items = self.items(audit_id)
        return items[0] if items else None

    def category_score(self, category_id: str) -> float:
        """Category score in [0, 1]; 0 when missing."""
        category = self.categories.get(category_id)
        if category is None or category.score is None:
            return 0.0
        return category.score


class ProviderError(BaseModel):
    model_config = ConfigDict(extra="ignore")

    code: Optional[int] = None
    message: Optional[str] = None


class PageSpeedResponse(BaseModel):
    """One strategy run (mobile or desktop)."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    lighthouse_result: Optional[LighthouseResult] = Field(default=None, alias="lighthouseResult")
    error: Optional[ProviderError] = None
