from .collection import (
    RequirementSources,
    collect_annual_compliance,
    collect_requirement_sources,
    load_requirements,
)

__all__ = [
    "RequirementSources",
    "collect_annual_compliance",
    "collect_requirement_sources",
    "load_requirements",
]
