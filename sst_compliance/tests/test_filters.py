"""
Tests: facet filtering.

Run with:
    pytest sst_compliance/tests/test_filters.py -v
"""

from datetime import date

import pytest

from sst_compliance.errors import InvalidFilterCriteria
from sst_compliance.models.enums import (
    RequirementCategory,
    SourceKind,
    SubjectBucket,
    VigencyState,
    WorkflowStatus,
)
from sst_compliance.models.schemas import FilterCriteria
from sst_compliance.services.filter_service import (
    count_by_vigency,
    facet_options,
    filter_requirements,
    parse_filter_criteria,
)
from sst_compliance.services.requirement_service import RequirementService

TODAY = date(2025, 6, 1)


@pytest.fixture
def requirements():
    contractor_records = [
        {
            "id": "sctr-expired", "document_type": "SCTR", "expiration_date": "2025-05-20",
            "owner_contractor_id": "c-1", "owner_contractor_name": "Montajes Andinos SAC",
            "scope_id": "emp-1",
        },
        {
            "id": "iso-expiring", "document_type": "ISO", "expiration_date": "2025-06-15",
            "authoritative_status": "Por Vencer", "owner_contractor_id": "c-2",
            "owner_contractor_name": "Servicios Eléctricos EIRL", "scope_id": "emp-1",
        },
        {
            "id": "ruc-valid", "document_type": "RUC", "expiration_date": "2025-12-31",
            "authoritative_status": "Vigente", "owner_contractor_id": "c-2",
            "owner_contractor_name": "Servicios Eléctricos EIRL", "scope_id": "emp-2",
        },
        {
            "id": "otro-pending", "document_type": "Otro", "expiration_date": "2025-08-01",
            "authoritative_status": "Pendiente", "owner_contractor_id": "c-3", "scope_id": "emp-2",
        },
    ]
    organizational_records = [
        {
            "id": "pol-1", "category": "Políticas", "title": "Política de Seguridad y Salud",
            "scope_id": "emp-1", "version": "2", "uploaded_by": "Ana Quispe",
        },
        {
            "id": "man-1", "category": "Manuales", "title": "Manual de EPP",
            "scope_id": "emp-1", "version": "1",
        },
    ]
    built = RequirementService(clock=lambda: TODAY).build(contractor_records, organizational_records)
    # Only one row carries process data
    built[4] = built[4].model_copy(
        update={"process": "Gestión de Mantenimiento", "sub_process": "Mantenimiento Preventivo", "site": "Sede Lima"}
    )
    return built


def _ids(items):
    return [r.id for r in items]


class TestFilterIdentity:
    def test_empty_criteria_returns_input(self, requirements):
        assert filter_requirements(requirements, FilterCriteria()) == requirements

    def test_no_criteria_returns_input(self, requirements):
        assert filter_requirements(requirements) == requirements

    def test_returns_new_list(self, requirements):
        result = filter_requirements(requirements, FilterCriteria())
        assert result is not requirements

    def test_all_bucket_is_unset(self, requirements):
        criteria = FilterCriteria(subject_bucket=SubjectBucket.ALL)
        assert criteria.is_empty
        assert filter_requirements(requirements, criteria) == requirements


class TestExactFacets:
    def test_scope(self, requirements):
        result = filter_requirements(requirements, FilterCriteria(scope_id="emp-2"))
        assert _ids(result) == ["ruc-valid", "otro-pending"]

    def test_workflow_status(self, requirements):
        result = filter_requirements(requirements, FilterCriteria(workflow_status=WorkflowStatus.APPROVED))
        assert _ids(result) == ["ruc-valid", "pol-1", "man-1"]

    def test_observed_matches_nothing_today(self, requirements):
        assert filter_requirements(requirements, FilterCriteria(workflow_status=WorkflowStatus.OBSERVED)) == []

    def test_category(self, requirements):
        result = filter_requirements(requirements, FilterCriteria(category=RequirementCategory.LEGAL))
        assert _ids(result) == ["sctr-expired", "ruc-valid", "pol-1"]

    def test_document_type(self, requirements):
        assert _ids(filter_requirements(requirements, FilterCriteria(document_type="ISO"))) == ["iso-expiring"]

    def test_subject_bucket(self, requirements):
        contractors = filter_requirements(requirements, FilterCriteria(subject_bucket=SubjectBucket.CONTRACTOR))
        organization = filter_requirements(requirements, FilterCriteria(subject_bucket=SubjectBucket.ORGANIZATION))
        assert len(contractors) == 4
        assert _ids(organization) == ["pol-1", "man-1"]

    def test_null_facet_never_matches(self, requirements):
        assert _ids(filter_requirements(requirements, FilterCriteria(uploaded_by="Ana Quispe"))) == ["pol-1"]
        assert _ids(filter_requirements(requirements, FilterCriteria(site="Sede Lima"))) == ["pol-1"]
        assert filter_requirements(requirements, FilterCriteria(approved_by="Ana Quispe")) == []


class TestTextFacets:
    def test_title_contains_case_insensitive(self, requirements):
        result = filter_requirements(requirements, FilterCriteria(title="manual"))
        assert _ids(result) == ["man-1"]

    def test_process_skips_rows_without_process(self, requirements):
        result = filter_requirements(requirements, FilterCriteria(process="MANTENIMIENTO"))
        assert _ids(result) == ["pol-1"]

    def test_sub_process(self, requirements):
        assert _ids(filter_requirements(requirements, FilterCriteria(sub_process="preventivo"))) == ["pol-1"]
        assert filter_requirements(requirements, FilterCriteria(sub_process="correctivo")) == []


class TestVigencyFacet:
    def test_single_state(self, requirements):
        result = filter_requirements(requirements, FilterCriteria(vigency_states={VigencyState.EXPIRED}))
        assert _ids(result) == ["sctr-expired"]

    def test_membership(self, requirements):
        criteria = FilterCriteria(vigency_states={VigencyState.EXPIRING, VigencyState.VALID})
        assert _ids(filter_requirements(requirements, criteria)) == ["iso-expiring", "ruc-valid", "otro-pending"]

    def test_unset_includes_sin_vencimiento(self, requirements):
        counts = count_by_vigency(filter_requirements(requirements, FilterCriteria()))
        assert counts[VigencyState.NO_EXPIRATION] == 2


class TestConjunction:
    CRITERIA = [
        FilterCriteria(scope_id="emp-1"),
        FilterCriteria(category=RequirementCategory.OPERATIONAL),
        FilterCriteria(subject_bucket=SubjectBucket.CONTRACTOR),
        FilterCriteria(vigency_states={VigencyState.EXPIRING}),
        FilterCriteria(title="de"),
        FilterCriteria(),
    ]

    def test_all_predicates_anded(self, requirements):
        criteria = FilterCriteria(scope_id="emp-1", subject_bucket=SubjectBucket.CONTRACTOR, category=RequirementCategory.LEGAL)
        assert _ids(filter_requirements(requirements, criteria)) == ["sctr-expired"]

    def test_composition_is_order_independent(self, requirements):
        for c1 in self.CRITERIA:
            for c2 in self.CRITERIA:
                chained = filter_requirements(filter_requirements(requirements, c1), c2)
                assert chained == filter_requirements(requirements, c1, c2)
                assert chained == filter_requirements(requirements, c2, c1)


class TestParseFilterCriteria:
    def test_blank_strings_are_unset(self):
        criteria = parse_filter_criteria({"scope_id": "", "workflow_status": "", "title": "  ", "vigency_states": ""})
        assert criteria.is_empty

    def test_none_is_empty(self):
        assert parse_filter_criteria(None).is_empty

    def test_single_vigency_value(self):
        criteria = parse_filter_criteria({"vigency_states": "caducado"})
        assert criteria.vigency_states == frozenset({VigencyState.EXPIRED})

    def test_enum_values_from_strings(self):
        criteria = parse_filter_criteria({"workflow_status": "POR_APROBAR", "subject_bucket": "empresa"})
        assert criteria.workflow_status == WorkflowStatus.AWAITING_APPROVAL
        assert criteria.subject_bucket == SubjectBucket.ORGANIZATION

    @pytest.mark.parametrize(
        "raw",
        [
            {"vigency_states": "sin_vencimiento"},
            {"vigency_states": ["vigente", "expired"]},
            {"workflow_status": "RECHAZADO"},
            {"subject_bucket": "trabajador"},
            {"owner": "c-1"},
        ],
    )
    def test_malformed_input_raises(self, raw):
        with pytest.raises(InvalidFilterCriteria):
            parse_filter_criteria(raw)

    def test_non_mapping_raises(self):
        with pytest.raises(InvalidFilterCriteria):
            parse_filter_criteria(["scope_id", "emp-1"])


class TestDashboardHelpers:
    def test_facet_options(self, requirements):
        options = facet_options(requirements)
        assert options["document_types"] == ["ISO", "Manuales", "Otro", "Políticas", "RUC", "SCTR"]
        assert options["sites"] == ["Sede Lima"]
        assert options["processes"] == ["Gestión de Mantenimiento"]
        assert options["uploaded_by"] == ["Ana Quispe"]

    def test_count_by_vigency(self, requirements):
        counts = count_by_vigency(requirements)
        assert counts == {
            VigencyState.VALID: 2,
            VigencyState.EXPIRING: 1,
            VigencyState.EXPIRED: 1,
            VigencyState.NO_EXPIRATION: 2,
        }
