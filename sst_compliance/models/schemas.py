"""
Data schemas for the compliance engine.

Raw source records (as returned by the fetch collaborators), the canonical
Requirement, filter criteria and the training-compliance results.
"""

from datetime import date
from typing import Annotated, Any, Generic, Literal, Optional, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, field_validator

from sst_compliance.utils.dates import as_calendar_date

from .enums import (
    DocumentStatus,
    RequirementCategory,
    SourceKind,
    SubjectBucket,
    SubjectKind,
    VigencyState,
    WorkflowStatus,
)

T = TypeVar("T")


def _blank_to_none(value: Any) -> Any:
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _version_text(value: Any, default: str) -> Any:
    if value is None:
        return default
    if isinstance(value, (int, float)):
        return str(value)
    return value


# ── Source records ───────────────────────────────────────


class ContractorDocumentRecord(BaseModel):
    """A legal/technical document held by a contractor."""
    source_kind: Literal["contractor"] = "contractor"
    id: str = Field(..., min_length=1)
    document_type: str = Field(..., min_length=1)  # ContractorDocumentType value
    expiration_date: Optional[date] = None
    authoritative_status: Optional[DocumentStatus] = None
    file_ref: str = ""
    owner_contractor_id: str = Field(..., min_length=1)
    owner_contractor_name: str = ""
    scope_id: str = Field(..., min_length=1)
    version: str = "1"  # contractor documents are single-version upstream

    @field_validator("expiration_date", mode="before")
    @classmethod
    def _truncate_expiration(cls, v: Any) -> Any:
        return as_calendar_date(v)

    @field_validator("authoritative_status", mode="before")
    @classmethod
    def _blank_status(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, v: Any) -> Any:
        return _version_text(v, default="1")


class OrganizationalDocumentRecord(BaseModel):
    """A versioned SST document published by the organization itself."""
    source_kind: Literal["documento_sst"] = "documento_sst"
    id: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)  # OrganizationalDocumentCategory value
    title: str = Field(..., min_length=1)
    file_ref: str = ""
    scope_id: str = Field(..., min_length=1)
    version: str = ""
    uploaded_by: Optional[str] = None

    @field_validator("version", mode="before")
    @classmethod
    def _version_as_text(cls, v: Any) -> Any:
        return _version_text(v, default="")

    @field_validator("uploaded_by", mode="before")
    @classmethod
    def _blank_uploader(cls, v: Any) -> Any:
        return _blank_to_none(v)


SourceRecord = Annotated[
    Union[ContractorDocumentRecord, OrganizationalDocumentRecord],
    Field(discriminator="source_kind"),
]

source_record_adapter: TypeAdapter[SourceRecord] = TypeAdapter(SourceRecord)


# ── Canonical requirement ────────────────────────────────


class Subject(BaseModel):
    """The entity a requirement is about."""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    kind: SubjectKind


class Requirement(BaseModel):
    """One compliance obligation, whatever source it came from."""
    model_config = ConfigDict(frozen=True)

    id: str
    document_type: str
    title: str
    subject: Subject
    category: RequirementCategory = RequirementCategory.OPERATIONAL
    expiration_date: Optional[date] = None
    authoritative_status: Optional[DocumentStatus] = None
    file_ref: str = ""
    source_kind: SourceKind
    scope_id: str
    version: str = ""
    uploaded_by: Optional[str] = None
    approved_by: Optional[str] = None
    site: Optional[str] = None
    process: Optional[str] = None
    sub_process: Optional[str] = None

    # Derived on every classification pass
    days_remaining: Optional[int] = None
    vigency_state: VigencyState = VigencyState.NO_EXPIRATION
    workflow_status: Optional[WorkflowStatus] = None

    @property
    def dedupe_key(self) -> tuple[str, str, str]:
        return (self.title, self.subject.id, self.document_type)


# ── Filtering ────────────────────────────────────────────


class FilterCriteria(BaseModel):
    """
    Independent, all-optional facet predicates. None means "not filtered".
    Blank strings and empty collections coming from form inputs become None.
    """
    model_config = ConfigDict(frozen=True, extra="forbid")

    # exact match
    scope_id: Optional[str] = None
    workflow_status: Optional[WorkflowStatus] = None
    category: Optional[RequirementCategory] = None
    document_type: Optional[str] = None
    subject_bucket: Optional[SubjectBucket] = None
    site: Optional[str] = None
    uploaded_by: Optional[str] = None
    approved_by: Optional[str] = None
    # case-insensitive contains
    process: Optional[str] = None
    sub_process: Optional[str] = None
    title: Optional[str] = None
    # membership
    vigency_states: Optional[frozenset[VigencyState]] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_unset(cls, v: Any) -> Any:
        return _blank_to_none(v)

    @field_validator("vigency_states", mode="before")
    @classmethod
    def _coerce_states(cls, v: Any) -> Any:
        if v is None:
            return None
        if isinstance(v, (str, VigencyState)):
            v = [v]
        if not isinstance(v, (list, tuple, set, frozenset)):
            return v
        states = [s for s in v if _blank_to_none(s) is not None]
        return states or None

    @field_validator("vigency_states")
    @classmethod
    def _only_dated_states(cls, v: Optional[frozenset[VigencyState]]) -> Optional[frozenset[VigencyState]]:
        if v and VigencyState.NO_EXPIRATION in v:
            raise ValueError("sin_vencimiento cannot be used as a vigency filter")
        return v

    @property
    def is_empty(self) -> bool:
        for name, value in self:
            if value is None:
                continue
            if name == "subject_bucket" and value == SubjectBucket.ALL:
                continue
            return False
        return True


# ── Training compliance ──────────────────────────────────


class TrainingEvent(BaseModel):
    """A completed training as seen from one worker."""
    title: str
    completion_date: date
    type: str = ""
    has_certificate: bool = False

    @field_validator("completion_date", mode="before")
    @classmethod
    def _truncate_completion(cls, v: Any) -> Any:
        return as_calendar_date(v)


class WorkerTrainingHistory(BaseModel):
    worker_id: str
    name: str = ""
    document_number: str = ""
    area: Optional[str] = None
    events: list[TrainingEvent] = []


class ScopeTrainingSnapshot(BaseModel):
    """Everything the training collaborator returns for one scope and year."""
    scope_id: str
    total_active_workers: int = Field(default=0, ge=0)
    workers: list[WorkerTrainingHistory] = []


class OrgFilters(BaseModel):
    """Organizational facets forwarded to the training collaborator."""
    unit: Optional[str] = None
    area: Optional[str] = None
    site: Optional[str] = None
    management_line: Optional[str] = None


class TrainingSummary(BaseModel):
    title: str
    date: date
    type: str = ""


class WorkerComplianceRecord(BaseModel):
    worker_id: str
    name: str
    document_number: str = ""
    area: Optional[str] = None
    scope_id: str = ""
    certificate_count: int = 0
    trainings: list[TrainingSummary] = []


class AnnualComplianceReport(BaseModel):
    year: int
    total_active_workers: int = 0
    workers: list[WorkerComplianceRecord] = []
    failed_scope_ids: list[str] = []


class CompliancePartition(BaseModel):
    threshold: int
    meets: list[WorkerComplianceRecord] = []
    does_not_meet: list[WorkerComplianceRecord] = []
    compliance_percentage: int = 0


# ── Fan-in ───────────────────────────────────────────────


class ScopeResult(BaseModel, Generic[T]):
    """Outcome of one fetch: either data, or the reason it failed."""
    scope_id: str
    data: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, scope_id: str, data: Any) -> "ScopeResult":
        return cls(scope_id=scope_id, data=data)

    @classmethod
    def failed(cls, scope_id: str, error: str) -> "ScopeResult":
        return cls(scope_id=scope_id, error=error)
