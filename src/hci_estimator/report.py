"""
Display-ready views of an estimation result.

Tables and chart series are returned as plain models so any front end can
draw them; nothing here formats HTML.
"""

from typing import List

from pydantic import BaseModel

from .diagnostics import format_number
from .models import EstimationResult
from .scaling import safe_div


class BreakdownRow(BaseModel):
    label: str
    value_tib: float
    detail: str
    is_raw_capacity: bool = False
    is_overhead: bool = False
    highlight: bool = False


class WaterfallStage(BaseModel):
    label: str
    value_tib: float


class WorkloadRow(BaseModel):
    id: str
    label: str
    compression_enabled: bool
    logical_tib: float
    compressed_tib: float
    dedupe_savings_tib: float
    effective_factor: float


class CapacityReport(BaseModel):
    """Estimation result together with its tables and chart series"""
    result: EstimationResult
    breakdown: List[BreakdownRow]
    waterfall: List[WaterfallStage]
    workloads: List[WorkloadRow]


def capacity_breakdown(result: EstimationResult) -> List[BreakdownRow]:
    """Phase-by-phase capacity table, from raw NVMe down to net effective."""
    lfs_percent = 100 * safe_div(result.lfs_overhead, result.object_and_replica)
    return [
        BreakdownRow(
            label="Raw NVMe Capacity",
            value_tib=result.total_raw_capacity,
            detail=f"All-flash NVMe across {result.hosts} ESA hosts",
            is_raw_capacity=True,
        ),
        BreakdownRow(
            label="Usable Raw Capacity",
            value_tib=result.usable_raw_capacity,
            detail=f"After {result.scheme_encoding} overhead",
            is_raw_capacity=True,
        ),
        BreakdownRow(
            label="Logical Dataset",
            value_tib=result.logical_total,
            detail="VM workload data before efficiency",
        ),
        BreakdownRow(
            label="After ESA Compression",
            value_tib=result.total_compressed,
            detail="512B compression within 4KB blocks",
        ),
        BreakdownRow(
            label="After ESA Deduplication",
            value_tib=result.after_dedupe,
            detail="4KB global post-processing deduplication",
        ),
        BreakdownRow(
            label="ESA LFS Overhead",
            value_tib=result.lfs_overhead,
            detail=f"Local File System metadata ({format_number(lfs_percent, 1)}%)",
            is_overhead=True,
        ),
        BreakdownRow(
            label="Checksum Overhead",
            value_tib=result.checksum_overhead,
            detail="End-to-end data integrity",
            is_overhead=True,
        ),
        BreakdownRow(
            label="Net Effective Capacity",
            value_tib=result.net_effective,
            detail=f"Final ESA storage consumption ({format_number(result.capacity_utilization, 1)}% utilization)",
            highlight=True,
        ),
    ]


def capacity_waterfall(result: EstimationResult) -> List[WaterfallStage]:
    return [
        WaterfallStage(label="Raw NVMe", value_tib=result.total_raw_capacity),
        WaterfallStage(label="Usable Raw", value_tib=result.usable_raw_capacity),
        WaterfallStage(label="Logical Data", value_tib=result.logical_total),
        WaterfallStage(label="Compressed", value_tib=result.total_compressed),
        WaterfallStage(label="After Dedupe", value_tib=result.after_dedupe),
        WaterfallStage(label="Net Effective", value_tib=result.net_effective),
    ]


def workload_rows(result: EstimationResult) -> List[WorkloadRow]:
    return [
        WorkloadRow(
            id=w.id,
            label=w.label,
            compression_enabled=w.compression_enabled,
            logical_tib=w.logical_tib,
            compressed_tib=w.compressed_tib,
            dedupe_savings_tib=w.dedupe_savings_tib,
            effective_factor=w.effective_factor,
        )
        for w in result.workloads
    ]


def build_report(result: EstimationResult) -> CapacityReport:
    return CapacityReport(
        result=result,
        breakdown=capacity_breakdown(result),
        waterfall=capacity_waterfall(result),
        workloads=workload_rows(result),
    )
