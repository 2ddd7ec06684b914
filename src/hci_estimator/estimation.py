"""
Capacity estimation logic for an ESA style hyperconverged cluster.

This module turns declared logical data into the net physical capacity the
cluster consumes. Rules of thumb behind the model:

* Compression runs first, per workload, at 512B granularity inside 4KB
  blocks. A workload is compressed only when compression is enabled both
  globally and in its own storage policy.
* Deduplication is global: the domain spans the whole cluster (there are no
  disk groups in ESA) and runs as a post-process on 4KB blocks, so it only
  changes space accounting, never the write path.
* Only cold data is a dedupe candidate. The chance that a cold block finds a
  twin is the workload similarity scaled by how well the domain performs at
  this cluster size. Compressed blocks dedupe less effectively (0.6 against
  0.75 for uncompressed ones).
* The redundancy scheme is re-expressed as replica data. LFS metadata
  overhead is charged on object + replica data, while checksums are charged
  on the deduplicated object data only.

Capacity utilization is measured against usable raw capacity, i.e. raw
capacity divided by the redundancy overhead.
"""

import logging
from typing import List, Sequence

from .diagnostics import Diagnostic, DiagnosticCode, format_number
from .exceptions import EmptyDatasetError
from .models import ClusterConfig, EstimationResult, WorkloadBreakdown, WorkloadItem
from .scaling import clamp, domain_scaling_factor, safe_div
from .tables import (
    COMPRESSED_DEDUPE_EFFICIENCY,
    DEFAULT_TABLES,
    UNCOMPRESSED_DEDUPE_EFFICIENCY,
    DomainTables,
)

logger = logging.getLogger(__name__)


def estimate(
    config: ClusterConfig,
    workloads: Sequence[WorkloadItem],
    tables: DomainTables = DEFAULT_TABLES
) -> EstimationResult:
    """
    Estimate net effective capacity for a validated configuration.

    Args:
        config: Cluster-level settings, already validated
        workloads: Declared workloads, already validated
        tables: Reference tables to estimate with

    Returns:
        EstimationResult: Per-phase totals, per-workload breakdown and diagnostics

    Raises:
        EmptyDatasetError: If the workloads hold no logical data at all
    """
    limits = tables.limits
    hosts = config.hosts

    scheme = tables.scheme(config.redundancy_scheme)
    raid_overhead = scheme.overhead
    total_raw_capacity = config.total_raw_capacity
    usable_raw_capacity = safe_div(total_raw_capacity, raid_overhead)

    logical_total = sum(w.logical_tib for w in workloads)
    if logical_total <= 0:
        raise EmptyDatasetError()

    # Phase 1: per-workload compression
    compressed_flags = []
    compression_factors = []
    compressed_sizes = []
    cold_sizes = []
    for w in workloads:
        profile = tables.profile(w.type)
        compressed_on = config.compression_enabled and w.compression_enabled
        factor = profile.compression_default if compressed_on else 1.0
        compressed = w.logical_tib / factor
        compressed_flags.append(compressed_on)
        compression_factors.append(factor)
        compressed_sizes.append(compressed)
        cold_sizes.append(compressed * clamp(w.cold_pct, 0, 1))

    total_compressed = sum(compressed_sizes)

    # Phase 2: global post-process deduplication
    domain_scaling = domain_scaling_factor(hosts, config.domain_mode, tables)

    breakdown: List[WorkloadBreakdown] = []
    total_dedupe_savings = 0.0
    for i, w in enumerate(workloads):
        profile = tables.profile(w.type)
        cold = cold_sizes[i]
        dedupe_probability = clamp(profile.similarity * domain_scaling, 0, 1)
        efficiency = COMPRESSED_DEDUPE_EFFICIENCY if compressed_flags[i] else UNCOMPRESSED_DEDUPE_EFFICIENCY
        dedupe_savings = clamp(cold * dedupe_probability * efficiency, 0, cold)
        total_dedupe_savings += dedupe_savings

        breakdown.append(WorkloadBreakdown(
            **w.model_dump(),
            label=profile.label,
            compression_factor=compression_factors[i],
            compressed_tib=compressed_sizes[i],
            cold_tib=cold,
            similarity=profile.similarity,
            dedupe_probability=dedupe_probability,
            dedupe_savings_tib=dedupe_savings,
            effective_factor=safe_div(w.logical_tib, compressed_sizes[i] - dedupe_savings),
        ))

    after_dedupe = max(0.0, total_compressed - total_dedupe_savings)

    # Phase 3: LFS overhead on object + replica data
    replica_data = after_dedupe * (raid_overhead - 1)
    object_and_replica = after_dedupe + replica_data
    lfs_overhead = object_and_replica * config.lfs_overhead_rate

    # Phase 4: checksum overhead on deduplicated object data
    checksum_overhead = after_dedupe * config.checksum_rate

    net_effective = after_dedupe + lfs_overhead + checksum_overhead

    logger.debug(
        "Phases: logical=%.3f compressed=%.3f deduped=%.3f lfs=%.3f checksum=%.3f",
        logical_total, total_compressed, after_dedupe, lfs_overhead, checksum_overhead
    )

    capacity_utilization = 100 * safe_div(net_effective, usable_raw_capacity)
    overall_reduction = safe_div(logical_total, net_effective)
    compression_only = safe_div(logical_total, total_compressed)
    dedupe_only = safe_div(total_compressed, after_dedupe)

    diagnostics: List[Diagnostic] = []

    if net_effective > usable_raw_capacity:
        diagnostics.append(Diagnostic(
            code=DiagnosticCode.CAPACITY_VIOLATION,
            params={"net_effective": net_effective, "usable_raw": usable_raw_capacity},
        ))
    if capacity_utilization > limits.utilization_warning_percent:
        diagnostics.append(Diagnostic(
            code=DiagnosticCode.HIGH_UTILIZATION,
            params={"utilization": capacity_utilization, "threshold": limits.utilization_warning_percent},
        ))
    if overall_reduction > limits.reduction_review_ratio:
        diagnostics.append(Diagnostic(
            code=DiagnosticCode.AGGRESSIVE_EFFICIENCY,
            params={"reduction": overall_reduction, "threshold": limits.reduction_review_ratio},
        ))

    if config.raw_tib_per_host >= limits.min_raw_tib_per_host:
        diagnostics.append(Diagnostic(code=DiagnosticCode.RAW_CAPACITY_MET))
    if limits.quorum_hosts <= hosts <= limits.max_hosts:
        diagnostics.append(Diagnostic(code=DiagnosticCode.HOST_COUNT_SUPPORTED))
    if scheme.adaptive and hosts >= limits.quorum_hosts:
        diagnostics.append(Diagnostic(
            code=DiagnosticCode.ADAPTIVE_SCHEME_SUPPORTED,
            params={"encoding": scheme.encoding},
        ))

    notes = [
        f"ESA Architecture: {scheme.encoding} with {format_number((raid_overhead - 1) * 100, 0)}% overhead",
        "Global deduplication domain spans entire cluster (no disk groups in ESA)",
        "4KB block deduplication with post-processing (no write-path impact)",
        "512B compression granularity within 4KB blocks (per storage policy)",
        f"LFS overhead: {format_number(config.lfs_overhead_rate * 100, 1)}% of object + replica data",
        f"Domain scaling: {format_number(domain_scaling, 3)} effectiveness ({hosts} hosts, {config.domain_mode})",
    ]

    result = EstimationResult(
        hosts=hosts,
        domain_mode=config.domain_mode,
        redundancy_scheme=config.redundancy_scheme,
        scheme_description=scheme.description,
        scheme_encoding=scheme.encoding,
        raid_overhead=raid_overhead,
        logical_total=logical_total,
        total_compressed=total_compressed,
        total_dedupe_savings=total_dedupe_savings,
        after_dedupe=after_dedupe,
        replica_data=replica_data,
        object_and_replica=object_and_replica,
        lfs_overhead=lfs_overhead,
        checksum_overhead=checksum_overhead,
        net_effective=net_effective,
        domain_scaling=domain_scaling,
        overall_reduction=overall_reduction,
        compression_only=compression_only,
        dedupe_only=dedupe_only,
        total_raw_capacity=total_raw_capacity,
        usable_raw_capacity=usable_raw_capacity,
        capacity_utilization=capacity_utilization,
        workloads=breakdown,
        diagnostics=diagnostics,
        notes=notes,
    )
    logger.info(
        "Estimated %.1f TiB net effective from %.1f TiB logical (%.1f%% of usable, %d warning(s))",
        net_effective, logical_total, capacity_utilization, len(result.warnings)
    )
    return result
