"""India Sales Report Module.

Monthly reconciliation of tax collected on India sales against the rate table.

Sub-modules:
- period_utils: Reporting period validation and month boundaries
- ledger: Transaction records and inclusion/exclusion rules
- rates: Jurisdiction rate lookup
- computations: Per-transaction expected tax and differences
- report_csv: Fixed-schema CSV rendering
- publisher: Object storage upload and presigned links
- repositories: SQLAlchemy-backed ledger and rate table
- report_job: IndiaSalesReportJob orchestrator
"""
from .computations import ReportRow, compute_row
from .ledger import LedgerRepository, TransactionRecord, select_transactions, sort_transactions
from .period_utils import MAX_YEAR, MIN_YEAR, ReportingPeriod, resolve_period
from .publisher import ReportArtifact, ReportPublisher, report_key
from .rates import JurisdictionRate, RateResolver, RateTable
from .report_csv import HEADERS, render_csv
from .report_job import IndiaSalesReportJob, JobStage, ReportResult

__all__ = [
    # Constants
    "HEADERS",
    "MIN_YEAR",
    "MAX_YEAR",
    # Data
    "ReportingPeriod",
    "TransactionRecord",
    "JurisdictionRate",
    "ReportRow",
    "ReportArtifact",
    "ReportResult",
    # Interfaces
    "LedgerRepository",
    "RateTable",
    # Functions
    "resolve_period",
    "select_transactions",
    "sort_transactions",
    "compute_row",
    "render_csv",
    "report_key",
    # Services
    "RateResolver",
    "ReportPublisher",
    "IndiaSalesReportJob",
    "JobStage",
]
