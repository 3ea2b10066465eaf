"""
Rules Config — the fixed rule tables behind categorisation and vigency.

These are enumerated product rules, not admin settings: the models only give
them a typed home and a single place to read them from.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import BaseModel, ConfigDict

from sst_compliance.models.enums import (
    ContractorDocumentType,
    OrganizationalDocumentCategory,
    RequirementCategory,
)


# ── Config models ────────────────────────────────────────

class CategoryConfig(BaseModel):
    """Document type → requirement category, one table per source kind."""
    model_config = ConfigDict(frozen=True)

    contractor_types: dict[str, RequirementCategory] = {
        ContractorDocumentType.SCTR.value: RequirementCategory.LEGAL,
        ContractorDocumentType.POLICY.value: RequirementCategory.LEGAL,
        ContractorDocumentType.RUC.value: RequirementCategory.LEGAL,
        ContractorDocumentType.SST_PLAN.value: RequirementCategory.OPERATIONAL,
        ContractorDocumentType.ISO.value: RequirementCategory.OPERATIONAL,
        ContractorDocumentType.OTHER.value: RequirementCategory.OPERATIONAL,
    }
    organizational_categories: dict[str, RequirementCategory] = {
        OrganizationalDocumentCategory.POLICIES.value: RequirementCategory.LEGAL,
        OrganizationalDocumentCategory.REGULATIONS.value: RequirementCategory.LEGAL,
        OrganizationalDocumentCategory.PROCEDURES.value: RequirementCategory.OPERATIONAL,
        OrganizationalDocumentCategory.MANUALS.value: RequirementCategory.OPERATIONAL,
        OrganizationalDocumentCategory.MATRICES.value: RequirementCategory.OPERATIONAL,
        OrganizationalDocumentCategory.PLANS.value: RequirementCategory.OPERATIONAL,
        OrganizationalDocumentCategory.STANDARDS.value: RequirementCategory.OPERATIONAL,
    }
    fallback: RequirementCategory = RequirementCategory.OPERATIONAL


class VigencyConfig(BaseModel):
    """Calendar window used when the source gives no authoritative status."""
    model_config = ConfigDict(frozen=True)

    expiring_window_days: int = 30  # 0..30 days left → por_vencer


# ── Accessors ────────────────────────────────────────────

@lru_cache()
def get_category_config() -> CategoryConfig:
    return CategoryConfig()


@lru_cache()
def get_vigency_config() -> VigencyConfig:
    return VigencyConfig()
