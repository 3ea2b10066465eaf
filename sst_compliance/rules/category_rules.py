"""
Category Rules — maps a document type to its Personal / Operativa / Legal facet.
"""

from __future__ import annotations

import logging

from sst_compliance.models.enums import RequirementCategory, SourceKind
from sst_compliance.rules.rules_config import get_category_config

logger = logging.getLogger(__name__)


def categorize(document_type: str, source_kind: SourceKind) -> RequirementCategory:
    """Look the type up in the table for its source; unmapped types are Operativa."""
    config = get_category_config()
    if source_kind == SourceKind.CONTRACTOR:
        table = config.contractor_types
    else:
        table = config.organizational_categories

    category = table.get(document_type)
    if category is None:
        logger.debug(f"Unmapped {source_kind.value} type '{document_type}' → {config.fallback.value}")
        return config.fallback
    return category
