"""
Pydantic models for the HCI capacity estimator.

This module contains the input records (cluster configuration and declared
workloads), the estimation result with its per-workload breakdown, and the
validation report.
"""

import math
import uuid
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator

from .diagnostics import Diagnostic, Severity, render_all
from .tables import (
    DEFAULT_LIMITS,
    DEFAULT_SCALING_MODE,
    DEFAULT_SCHEME_KEY,
    DEFAULT_WORKLOAD_TYPE,
    RedundancyScheme,
)

ScalingMode = Literal["aggressive", "typical", "conservative"]

# Upper bounds keep every derived capacity finite
MAX_CAPACITY_TIB = 1e12
MAX_HOSTS_ACCEPTED = 1_000_000
MAX_OVERHEAD_PERCENT = 100.0


def _coerce_float(value, default: float) -> float:
    # Blank or unparseable form values fall back instead of failing.
    # Infinities pass through and are rejected by the field constraints.
    try:
        result = float(value)
    except (TypeError, ValueError):
        return default
    return default if math.isnan(result) else result


def _new_workload_id() -> str:
    return str(uuid.uuid4())[:8]


class WorkloadItem(BaseModel):
    """One declared data source"""
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_workload_id, min_length=1, description="Stable workload identifier")
    type: str = Field(default=DEFAULT_WORKLOAD_TYPE, description="Workload class key, e.g. full_clone_vdi")
    logical_tib: float = Field(default=0.0, ge=0, le=MAX_CAPACITY_TIB, allow_inf_nan=False,
                               description="Logical size before any efficiency (TiB)")
    cold_pct: float = Field(default=0.0, ge=0, le=1, allow_inf_nan=False,
                            description="Fraction of compressed data eligible for dedupe")
    compression_enabled: bool = Field(default=True, description="Per-workload compression via storage policy")

    @field_validator('type', mode='before')
    @classmethod
    def default_blank_type(cls, v):
        if not isinstance(v, str) or not v.strip():
            return DEFAULT_WORKLOAD_TYPE
        return v.strip()

    @field_validator('logical_tib', 'cold_pct', mode='before')
    @classmethod
    def coerce_number(cls, v):
        return _coerce_float(v, 0.0)


class ClusterConfig(BaseModel):
    """Cluster-level scalars for an estimation"""
    model_config = ConfigDict(frozen=True)

    hosts: int = Field(default=6, ge=0, le=MAX_HOSTS_ACCEPTED, description="Number of hosts in the cluster")
    raw_tib_per_host: float = Field(default=20.0, ge=0, le=MAX_CAPACITY_TIB, allow_inf_nan=False,
                                    description="Raw NVMe capacity per host (TiB)")
    redundancy_scheme: str = Field(default=DEFAULT_SCHEME_KEY, description="Redundancy scheme key, e.g. raid5")
    compression_enabled: bool = Field(default=True, description="Global compression toggle")
    domain_mode: ScalingMode = Field(default=DEFAULT_SCALING_MODE, description="Dedupe domain scaling aggressiveness")
    lfs_overhead_percent: float = Field(default=DEFAULT_LIMITS.lfs_overhead_percent, ge=0,
                                        le=MAX_OVERHEAD_PERCENT, allow_inf_nan=False,
                                        description="LFS metadata overhead on object + replica data (%)")
    checksum_overhead_percent: float = Field(default=DEFAULT_LIMITS.checksum_overhead_percent, ge=0,
                                             le=MAX_OVERHEAD_PERCENT, allow_inf_nan=False,
                                             description="Checksum overhead on deduplicated data (%)")

    @property
    def total_raw_capacity(self) -> float:
        return self.hosts * self.raw_tib_per_host

    @property
    def lfs_overhead_rate(self) -> float:
        return self.lfs_overhead_percent / 100

    @property
    def checksum_rate(self) -> float:
        return self.checksum_overhead_percent / 100


class EstimationRequest(BaseModel):
    """Cluster configuration together with its declared workloads"""
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    workloads: List[WorkloadItem] = Field(default_factory=list)

    @field_validator('workloads')
    @classmethod
    def unique_workload_ids(cls, v):
        ids = [w.id for w in v]
        if len(ids) != len(set(ids)):
            raise ValueError('Workload ids must be unique')
        return v

    @property
    def total_logical_tib(self) -> float:
        return sum(w.logical_tib for w in self.workloads)


class WorkloadBreakdown(WorkloadItem):
    """A workload enriched with its per-phase figures"""
    label: str
    compression_factor: float
    compressed_tib: float
    cold_tib: float
    similarity: float
    dedupe_probability: float
    dedupe_savings_tib: float
    effective_factor: float


class EstimationResult(BaseModel):
    """Complete capacity estimation result"""
    model_config = ConfigDict(frozen=True)

    hosts: int
    domain_mode: str
    redundancy_scheme: str
    scheme_description: str
    scheme_encoding: str
    raid_overhead: float

    logical_total: float
    total_compressed: float
    total_dedupe_savings: float
    after_dedupe: float
    replica_data: float
    object_and_replica: float
    lfs_overhead: float
    checksum_overhead: float
    net_effective: float

    domain_scaling: float
    overall_reduction: float
    compression_only: float
    dedupe_only: float

    total_raw_capacity: float
    usable_raw_capacity: float
    capacity_utilization: float

    workloads: List[WorkloadBreakdown]
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)

    @computed_field
    @property
    def warnings(self) -> List[str]:
        return render_all(self.diagnostics, Severity.WARNING)

    @computed_field
    @property
    def compliance(self) -> List[str]:
        return render_all(self.diagnostics, Severity.COMPLIANCE)


class ValidationReport(BaseModel):
    """Blocking errors and advisory warnings for an input snapshot"""
    issues: List[Diagnostic] = Field(default_factory=list)

    @computed_field
    @property
    def errors(self) -> List[str]:
        return render_all(self.issues, Severity.ERROR)

    @computed_field
    @property
    def warnings(self) -> List[str]:
        return render_all(self.issues, Severity.WARNING)

    @property
    def has_errors(self) -> bool:
        return any(i.severity == Severity.ERROR for i in self.issues)


class SchemeAvailability(BaseModel):
    """Redundancy schemes selectable for a given host count"""
    hosts: int
    available: List[RedundancyScheme]
    selected: Optional[str] = None
    limitations: List[Diagnostic] = Field(default_factory=list)

    @computed_field
    @property
    def limitation_messages(self) -> List[str]:
        return render_all(self.limitations, Severity.WARNING)
