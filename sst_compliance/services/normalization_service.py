"""
Normalization Service — turns raw source records into canonical Requirements.

Each raw record is validated into its arm of the SourceRecord union (tagged by
source_kind) before mapping, so every arm only ever carries the fields its
source really provides. Records missing identity fields raise
NormalizationError; batch helpers drop them and keep going.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping, Optional

from pydantic import ValidationError

from sst_compliance.errors import NormalizationError
from sst_compliance.models.enums import SourceKind, SubjectKind, WorkflowStatus
from sst_compliance.models.schemas import (
    ContractorDocumentRecord,
    OrganizationalDocumentRecord,
    Requirement,
    Subject,
    source_record_adapter,
)
from sst_compliance.rules.category_rules import categorize

logger = logging.getLogger(__name__)

DEFAULT_ORGANIZATION_NAME = "Empresa"


def normalize_record(
    raw: Mapping[str, Any],
    source_kind: SourceKind,
    organization_names: Optional[Mapping[str, str]] = None,
) -> Requirement:
    """Map one raw record to a Requirement. Date-derived fields are filled in by classification."""
    record = _parse(raw, source_kind)

    if isinstance(record, ContractorDocumentRecord):
        return _from_contractor_document(record)
    return _from_organizational_document(record, organization_names or {})


def normalize_batch(
    records: Iterable[Mapping[str, Any]],
    source_kind: SourceKind,
    organization_names: Optional[Mapping[str, str]] = None,
) -> list[Requirement]:
    """Normalize every record, dropping the malformed ones."""
    requirements: list[Requirement] = []
    dropped = 0
    for raw in records:
        try:
            requirements.append(normalize_record(raw, source_kind, organization_names))
        except NormalizationError as exc:
            dropped += 1
            logger.warning(f"Dropped {source_kind.value} record {exc.record_id or '<no id>'}: {exc}")

    logger.info(
        f"Normalized {len(requirements)} {source_kind.value} records"
        + (f" ({dropped} dropped)" if dropped else "")
    )
    return requirements


def flatten_contractors(contractors: Iterable[Mapping[str, Any]]) -> list[dict[str, Any]]:
    """
    Flatten the nested contractor payload (contractor + its documentos) into
    flat contractor document records.
    """
    flat: list[dict[str, Any]] = []
    for contractor in contractors:
        if not isinstance(contractor, Mapping):
            logger.warning(f"Skipping contractor entry of type {type(contractor).__name__}")
            continue
        contractor_id = contractor.get("id")
        if not contractor_id:
            logger.warning("Skipping contractor without id")
            continue

        documents = contractor.get("documentos") or []
        if not isinstance(documents, (list, tuple)):
            logger.warning(f"Contractor {contractor_id}: documentos is not a list, ignoring")
            documents = []

        for doc in documents:
            if not isinstance(doc, Mapping):
                logger.warning(f"Contractor {contractor_id}: skipping document of type {type(doc).__name__}")
                continue
            flat.append({
                "id": doc.get("id"),
                "document_type": doc.get("tipo_documento"),
                "expiration_date": doc.get("fecha_vencimiento"),
                "authoritative_status": doc.get("estado_doc"),
                "file_ref": doc.get("archivo_url") or "",
                "owner_contractor_id": contractor_id,
                "owner_contractor_name": contractor.get("razon_social") or "",
                "scope_id": contractor.get("empresa_id"),
            })
    return flat


# ── Per-source mapping ───────────────────────────────────


def _parse(raw: Mapping[str, Any], source_kind: SourceKind):
    if not isinstance(raw, Mapping):
        raise NormalizationError(f"Expected a mapping, got {type(raw).__name__}")
    record_id = raw.get("id")

    payload = {**raw, "source_kind": source_kind.value}
    try:
        return source_record_adapter.validate_python(payload)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"][1:]) for err in exc.errors()})
        raise NormalizationError(
            f"Invalid fields: {', '.join(fields)}",
            record_id=str(record_id) if record_id else None,
        ) from exc


def _from_contractor_document(record: ContractorDocumentRecord) -> Requirement:
    return Requirement(
        id=record.id,
        document_type=record.document_type,
        title=record.document_type,
        subject=Subject(
            id=record.owner_contractor_id,
            name=record.owner_contractor_name,
            kind=SubjectKind.CONTRACTOR,
        ),
        category=categorize(record.document_type, SourceKind.CONTRACTOR),
        expiration_date=record.expiration_date,
        authoritative_status=record.authoritative_status,
        file_ref=record.file_ref,
        source_kind=SourceKind.CONTRACTOR,
        scope_id=record.scope_id,
        version=record.version,
    )


def _from_organizational_document(
    record: OrganizationalDocumentRecord,
    organization_names: Mapping[str, str],
) -> Requirement:
    return Requirement(
        id=record.id,
        document_type=record.category,
        title=record.title,
        subject=Subject(
            id=record.scope_id,
            name=organization_names.get(record.scope_id) or DEFAULT_ORGANIZATION_NAME,
            kind=SubjectKind.ORGANIZATION,
        ),
        category=categorize(record.category, SourceKind.ORGANIZATIONAL),
        expiration_date=None,
        workflow_status=WorkflowStatus.APPROVED,
        file_ref=record.file_ref,
        source_kind=SourceKind.ORGANIZATIONAL,
        scope_id=record.scope_id,
        version=record.version,
        uploaded_by=record.uploaded_by,
    )
