"""
Reference tables for the HCI capacity estimator.

Redundancy schemes, workload profiles, deduplication-domain scaling tiers and
platform limits for a vSAN ESA style cluster. Everything here is read-only
data bundled into a frozen ``DomainTables`` instance; the validator and the
estimation pipeline take the tables as an argument so alternate sets can be
injected (tests, other platform generations).

Lookups never raise. An unknown workload class, redundancy scheme or scaling
mode resolves to an explicit neutral entry.
"""

from types import MappingProxyType
from typing import Dict, Mapping

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class RedundancyScheme(BaseModel):
    """Capacity overhead and host requirement of a redundancy scheme"""
    model_config = ConfigDict(frozen=True)

    key: str
    min_hosts: int = Field(..., ge=0)
    overhead: float = Field(..., gt=1.0, description="Raw capacity multiplier")
    description: str
    encoding: str = Field(..., description="On-disk layout, e.g. 4+2 erasure coding")
    adaptive: bool = False


class WorkloadProfile(BaseModel):
    """Compression and similarity characteristics of a workload class"""
    model_config = ConfigDict(frozen=True)

    key: str
    label: str
    compression_min: float = Field(..., ge=1.0)
    compression_max: float = Field(..., ge=1.0)
    compression_default: float = Field(..., ge=1.0)
    similarity: float = Field(..., ge=0.0, le=1.0)


class ScalingTier(BaseModel):
    """Saturation curve parameters for a domain-scaling mode"""
    model_config = ConfigDict(frozen=True)

    cap: float = Field(..., gt=0.0, le=1.0)
    k: float = Field(..., gt=0.0)


class PlatformLimits(BaseModel):
    """Platform limits and thresholds used by validation and diagnostics"""
    model_config = ConfigDict(frozen=True)

    quorum_hosts: int = 3
    max_hosts: int = 64
    max_vms_per_host: int = 500
    avg_vm_size_tib: float = 2.0
    min_raw_tib_per_host: float = 1.6
    max_raw_tib_per_host: float = 500.0
    lfs_overhead_percent: float = 13.1
    checksum_overhead_percent: float = 2.0
    utilization_warning_percent: float = 85.0
    reduction_review_ratio: float = 8.0


# Compressed blocks dedupe less effectively than uncompressed ones
COMPRESSED_DEDUPE_EFFICIENCY = 0.6
UNCOMPRESSED_DEDUPE_EFFICIENCY = 0.75

DEFAULT_SCHEME_KEY = "raid5"
DEFAULT_WORKLOAD_TYPE = "unstructured"
DEFAULT_SCALING_MODE = "typical"
FALLBACK_SCALING_MODE = "conservative"

UNKNOWN_SCHEME = RedundancyScheme(
    key="unknown",
    min_hosts=0,
    overhead=1.25,
    description="Unknown RAID",
    encoding="Unknown",
)

NEUTRAL_PROFILE = WorkloadProfile(
    key="unknown",
    label="Unknown",
    compression_min=1.0,
    compression_max=1.0,
    compression_default=1.0,
    similarity=0.0,
)

REDUNDANCY_SCHEMES = MappingProxyType({
    "raid1": RedundancyScheme(
        key="raid1",
        min_hosts=3,
        overhead=2.0,
        description="RAID-1 Mirror (FTT=1)",
        encoding="1+1 Mirroring",
    ),
    "raid5": RedundancyScheme(
        key="raid5",
        min_hosts=3,
        overhead=1.25,
        description="RAID-5 Adaptive Erasure Coding (FTT=1)",
        encoding="2+1 or 4+1 Adaptive",
        adaptive=True,
    ),
    "raid6": RedundancyScheme(
        key="raid6",
        min_hosts=6,
        overhead=1.5,
        description="RAID-6 Erasure Coding (FTT=2)",
        encoding="4+2 Erasure Coding",
    ),
})

WORKLOAD_PROFILES = MappingProxyType({
    "full_clone_vdi": WorkloadProfile(
        key="full_clone_vdi", label="VDI Clones",
        compression_min=2.0, compression_max=8.0, compression_default=4.0,
        similarity=0.85,
    ),
    "unstructured": WorkloadProfile(
        key="unstructured", label="Unstructured",
        compression_min=1.2, compression_max=2.5, compression_default=1.6,
        similarity=0.35,
    ),
    "oltp_sql": WorkloadProfile(
        key="oltp_sql", label="OLTP/SQL",
        compression_min=1.0, compression_max=1.6, compression_default=1.2,
        similarity=0.15,
    ),
    "encrypted": WorkloadProfile(
        key="encrypted", label="Encrypted",
        compression_min=1.0, compression_max=1.05, compression_default=1.0,
        similarity=0.0,
    ),
    "backup": WorkloadProfile(
        key="backup", label="Backup",
        compression_min=1.5, compression_max=3.0, compression_default=2.0,
        similarity=0.5,
    ),
})

# Ordered from most to least aggressive
SCALING_TIERS = MappingProxyType({
    "aggressive": ScalingTier(cap=1.0, k=0.25),
    "typical": ScalingTier(cap=0.85, k=0.20),
    "conservative": ScalingTier(cap=0.7, k=0.15),
})

_TABLE_FIELDS = ("redundancy_schemes", "workload_profiles", "scaling_tiers")


class DomainTables(BaseModel):
    """Immutable bundle of reference data passed to the validator and pipeline"""
    model_config = ConfigDict(frozen=True)

    redundancy_schemes: Mapping[str, RedundancyScheme] = Field(default_factory=lambda: dict(REDUNDANCY_SCHEMES))
    workload_profiles: Mapping[str, WorkloadProfile] = Field(default_factory=lambda: dict(WORKLOAD_PROFILES))
    scaling_tiers: Mapping[str, ScalingTier] = Field(default_factory=lambda: dict(SCALING_TIERS))
    limits: PlatformLimits = Field(default_factory=PlatformLimits)

    def model_post_init(self, context) -> None:
        # Validation copies the tables into fresh dicts; expose them read-only
        for name in _TABLE_FIELDS:
            object.__setattr__(self, name, MappingProxyType(dict(getattr(self, name))))

    @field_serializer(*_TABLE_FIELDS)
    def serialize_table(self, table: Mapping) -> Dict:
        return dict(table)

    def scheme(self, key: str) -> RedundancyScheme:
        return self.redundancy_schemes.get(key, UNKNOWN_SCHEME)

    def is_known_scheme(self, key: str) -> bool:
        return key in self.redundancy_schemes

    def profile(self, workload_type: str) -> WorkloadProfile:
        return self.workload_profiles.get(workload_type, NEUTRAL_PROFILE)

    def scaling_tier(self, mode: str) -> ScalingTier:
        if mode in self.scaling_tiers:
            return self.scaling_tiers[mode]
        return self.scaling_tiers.get(FALLBACK_SCALING_MODE, SCALING_TIERS[FALLBACK_SCALING_MODE])


DEFAULT_TABLES = DomainTables()
DEFAULT_LIMITS = DEFAULT_TABLES.limits
