"""
Input validation for capacity estimations.

Errors block the estimation; warnings are advisory and travel with the
report. Nothing here mutates its inputs.
"""

import logging
import math
from typing import List, Optional, Sequence

from .diagnostics import Diagnostic, DiagnosticCode
from .models import ClusterConfig, SchemeAvailability, ValidationReport, WorkloadItem
from .tables import DEFAULT_SCHEME_KEY, DEFAULT_TABLES, DomainTables

logger = logging.getLogger(__name__)


def validate(
    config: ClusterConfig,
    workloads: Sequence[WorkloadItem],
    tables: DomainTables = DEFAULT_TABLES
) -> ValidationReport:
    """
    Check a cluster configuration and its workloads against platform limits.

    Args:
        config: Cluster-level settings
        workloads: Declared workloads
        tables: Reference tables to validate against

    Returns:
        ValidationReport: Structured issues with rendered errors and warnings
    """
    limits = tables.limits
    hosts = config.hosts
    issues: List[Diagnostic] = []

    if hosts < limits.quorum_hosts:
        issues.append(Diagnostic(
            code=DiagnosticCode.HOSTS_BELOW_QUORUM,
            params={"quorum_hosts": limits.quorum_hosts, "hosts": hosts},
        ))
    if hosts > limits.max_hosts:
        issues.append(Diagnostic(
            code=DiagnosticCode.HOSTS_ABOVE_MAX,
            params={"max_hosts": limits.max_hosts, "hosts": hosts},
        ))

    # Unknown schemes carry no host requirement
    if tables.is_known_scheme(config.redundancy_scheme):
        scheme = tables.scheme(config.redundancy_scheme)
        if hosts < scheme.min_hosts:
            issues.append(Diagnostic(
                code=DiagnosticCode.SCHEME_MIN_HOSTS,
                params={"description": scheme.description, "min_hosts": scheme.min_hosts, "hosts": hosts},
            ))

    raw = config.raw_tib_per_host
    if raw < limits.min_raw_tib_per_host:
        issues.append(Diagnostic(
            code=DiagnosticCode.RAW_CAPACITY_BELOW_MIN,
            params={"min_tib": limits.min_raw_tib_per_host, "raw_tib": raw},
        ))
    if raw > limits.max_raw_tib_per_host:
        issues.append(Diagnostic(
            code=DiagnosticCode.RAW_CAPACITY_ABOVE_TESTED,
            params={"raw_tib": raw, "max_tib": limits.max_raw_tib_per_host},
        ))

    total_logical = sum(w.logical_tib for w in workloads)
    if total_logical <= 0:
        issues.append(Diagnostic(code=DiagnosticCode.EMPTY_DATASET, params={"total_logical": total_logical}))

    estimated_vms = total_logical / limits.avg_vm_size_tib
    if estimated_vms > hosts * limits.max_vms_per_host:
        issues.append(Diagnostic(
            code=DiagnosticCode.VM_DENSITY_EXCEEDED,
            params={
                "vms": int(math.floor(estimated_vms + 0.5)),
                "max_vms_per_host": limits.max_vms_per_host,
                "hosts": hosts,
            },
        ))

    report = ValidationReport(issues=issues)
    if report.has_errors:
        logger.info("Validation found %d blocking error(s) for %d host(s)", len(report.errors), hosts)
    return report


def available_schemes(
    hosts: int,
    current: Optional[str] = None,
    tables: DomainTables = DEFAULT_TABLES
) -> SchemeAvailability:
    """
    Work out which redundancy schemes a host count supports.

    The current selection is kept while it stays available; otherwise the
    adaptive default is preferred, then the first available scheme.
    """
    available = []
    limitations = []
    for scheme in tables.redundancy_schemes.values():
        if hosts >= scheme.min_hosts:
            available.append(scheme)
        else:
            limitations.append(Diagnostic(
                code=DiagnosticCode.SCHEME_UNAVAILABLE,
                params={
                    "description": scheme.description,
                    "min_hosts": scheme.min_hosts,
                    "encoding": scheme.encoding,
                },
            ))

    keys = [s.key for s in available]
    if current in keys:
        selected = current
    elif DEFAULT_SCHEME_KEY in keys:
        selected = DEFAULT_SCHEME_KEY
    else:
        selected = keys[0] if keys else None

    return SchemeAvailability(hosts=hosts, available=available, selected=selected, limitations=limitations)
