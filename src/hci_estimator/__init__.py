"""
HCI Capacity Estimator Package

Estimates usable and net effective capacity for a hyperconverged storage
cluster from host count, raw capacity per host, redundancy scheme and the
declared workloads with their compression/deduplication characteristics.
"""

__version__ = "1.0.0"
__author__ = "HCI Estimator Team"

# Import main components for easy access
from .models import (
    WorkloadItem,
    ClusterConfig,
    EstimationRequest,
    EstimationResult,
    WorkloadBreakdown,
    ValidationReport,
    SchemeAvailability
)

from .tables import (
    DomainTables,
    RedundancyScheme,
    WorkloadProfile,
    PlatformLimits,
    DEFAULT_TABLES
)

from .diagnostics import Diagnostic, DiagnosticCode, Severity
from .exceptions import CapacityEstimatorError, EmptyDatasetError
from .scaling import clamp, safe_div, domain_scaling_factor
from .validation import validate, available_schemes
from .estimation import estimate

# Make key components available at package level
__all__ = [
    "WorkloadItem",
    "ClusterConfig",
    "EstimationRequest",
    "EstimationResult",
    "WorkloadBreakdown",
    "ValidationReport",
    "SchemeAvailability",
    "DomainTables",
    "RedundancyScheme",
    "WorkloadProfile",
    "PlatformLimits",
    "DEFAULT_TABLES",
    "Diagnostic",
    "DiagnosticCode",
    "Severity",
    "CapacityEstimatorError",
    "EmptyDatasetError",
    "clamp",
    "safe_div",
    "domain_scaling_factor",
    "validate",
    "available_schemes",
    "estimate"
]
