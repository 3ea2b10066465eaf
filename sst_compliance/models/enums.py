from enum import Enum

class SourceKind(str, Enum):
    CONTRACTOR = "contractor"
    ORGANIZATIONAL = "documento_sst"

class SubjectKind(str, Enum):
    ORGANIZATION = "Empresa"
    CONTRACTOR = "Contratista"
    WORKER = "Trabajador"

class SubjectBucket(str, Enum):
    ALL = "todos"
    ORGANIZATION = "empresa"
    CONTRACTOR = "contratista"

class RequirementCategory(str, Enum):
    PERSONAL = "Personal"
    OPERATIONAL = "Operativa"
    LEGAL = "Legal"

class ContractorDocumentType(str, Enum):
    RUC = "RUC"
    SCTR = "SCTR"
    POLICY = "Póliza"
    ISO = "ISO"
    SST_PLAN = "Plan SST"
    OTHER = "Otro"

class OrganizationalDocumentCategory(str, Enum):
    POLICIES = "Políticas"
    REGULATIONS = "Reglamentos"
    PROCEDURES = "Procedimientos"
    MANUALS = "Manuales"
    MATRICES = "Matrices"
    PLANS = "Planes"
    STANDARDS = "Estándares"

class DocumentStatus(str, Enum):
    """Status reported by the contractor-documents source."""
    VALID = "Vigente"
    ABOUT_TO_EXPIRE = "Por Vencer"
    EXPIRED = "Vencido"
    PENDING = "Pendiente"

class VigencyState(str, Enum):
    VALID = "vigente"
    EXPIRING = "por_vencer"
    EXPIRED = "caducado"
    NO_EXPIRATION = "sin_vencimiento"

class WorkflowStatus(str, Enum):
    PENDING = "PENDIENTE"
    OVERDUE = "ATRASADO"
    AWAITING_APPROVAL = "POR_APROBAR"
    APPROVED = "APROBADO"
    OBSERVED = "OBSERVADO"  # legend only, see UNREACHABLE_WORKFLOW_STATUSES

# No source reports observations yet, so the mapper never yields these.
UNREACHABLE_WORKFLOW_STATUSES = frozenset({WorkflowStatus.OBSERVED})
