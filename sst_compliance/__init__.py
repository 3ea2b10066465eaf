"""
SST Compliance Engine

Normalizes contractor and organizational SST documents into one requirement
model, classifies vigency and workflow status, and aggregates annual training
compliance per worker.

    from sst_compliance.services import RequirementService
    requirements = RequirementService().build(contractor_records, sst_records, today=today)
"""

__version__ = "0.1.0"
