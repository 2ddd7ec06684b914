"""
Structured diagnostics and their display rendering.

Validation and estimation produce ``Diagnostic`` records (a code plus the
numbers that triggered it). They are turned into human-readable strings only
when a caller asks for ``message`` or for the rendered string lists on the
result models, so tests can assert on codes and parameters directly.
"""

import string
from enum import Enum
from typing import Dict, Iterable, List, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field


class Severity(str, Enum):
    ERROR = "error"
    WARNING = "warning"
    COMPLIANCE = "compliance"


class DiagnosticCode(str, Enum):
    # Validator errors
    HOSTS_BELOW_QUORUM = "hosts_below_quorum"
    HOSTS_ABOVE_MAX = "hosts_above_max"
    SCHEME_MIN_HOSTS = "scheme_min_hosts"
    RAW_CAPACITY_BELOW_MIN = "raw_capacity_below_min"
    EMPTY_DATASET = "empty_dataset"
    # Validator warnings
    RAW_CAPACITY_ABOVE_TESTED = "raw_capacity_above_tested"
    VM_DENSITY_EXCEEDED = "vm_density_exceeded"
    SCHEME_UNAVAILABLE = "scheme_unavailable"
    # Estimation warnings
    CAPACITY_VIOLATION = "capacity_violation"
    HIGH_UTILIZATION = "high_utilization"
    AGGRESSIVE_EFFICIENCY = "aggressive_efficiency"
    # Compliance notes
    RAW_CAPACITY_MET = "raw_capacity_met"
    HOST_COUNT_SUPPORTED = "host_count_supported"
    ADAPTIVE_SCHEME_SUPPORTED = "adaptive_scheme_supported"


_SEVERITY = {
    DiagnosticCode.HOSTS_BELOW_QUORUM: Severity.ERROR,
    DiagnosticCode.HOSTS_ABOVE_MAX: Severity.ERROR,
    DiagnosticCode.SCHEME_MIN_HOSTS: Severity.ERROR,
    DiagnosticCode.RAW_CAPACITY_BELOW_MIN: Severity.ERROR,
    DiagnosticCode.EMPTY_DATASET: Severity.ERROR,
    DiagnosticCode.RAW_CAPACITY_ABOVE_TESTED: Severity.WARNING,
    DiagnosticCode.VM_DENSITY_EXCEEDED: Severity.WARNING,
    DiagnosticCode.SCHEME_UNAVAILABLE: Severity.WARNING,
    DiagnosticCode.CAPACITY_VIOLATION: Severity.WARNING,
    DiagnosticCode.HIGH_UTILIZATION: Severity.WARNING,
    DiagnosticCode.AGGRESSIVE_EFFICIENCY: Severity.WARNING,
    DiagnosticCode.RAW_CAPACITY_MET: Severity.COMPLIANCE,
    DiagnosticCode.HOST_COUNT_SUPPORTED: Severity.COMPLIANCE,
    DiagnosticCode.ADAPTIVE_SCHEME_SUPPORTED: Severity.COMPLIANCE,
}

_TEMPLATES = {
    DiagnosticCode.HOSTS_BELOW_QUORUM:
        "vSAN ESA requires minimum {quorum_hosts} hosts for quorum.",
    DiagnosticCode.HOSTS_ABOVE_MAX:
        "vSAN ESA supports maximum {max_hosts} hosts per cluster.",
    DiagnosticCode.SCHEME_MIN_HOSTS:
        "{description} requires minimum {min_hosts} hosts.",
    DiagnosticCode.RAW_CAPACITY_BELOW_MIN:
        "ESA requires minimum {min_tib} TiB NVMe per host.",
    DiagnosticCode.EMPTY_DATASET:
        "Total logical dataset must be > 0.",
    DiagnosticCode.RAW_CAPACITY_ABOVE_TESTED:
        "{raw_tib} TiB per host exceeds typical ESA configurations ({max_tib} TiB max tested).",
    DiagnosticCode.VM_DENSITY_EXCEEDED:
        "Estimated {vms} VMs may exceed ESA limit of {max_vms_per_host} VMs per host.",
    DiagnosticCode.SCHEME_UNAVAILABLE:
        "{description} requires minimum {min_hosts} hosts (ESA {encoding})",
    DiagnosticCode.CAPACITY_VIOLATION:
        "CAPACITY VIOLATION: Net effective ({net_effective:.1f} TiB) exceeds usable raw ({usable_raw:.1f} TiB)",
    DiagnosticCode.HIGH_UTILIZATION:
        "HIGH UTILIZATION: {utilization:.1f}% of usable capacity (ESA recommends <{threshold}%)",
    DiagnosticCode.AGGRESSIVE_EFFICIENCY:
        "AGGRESSIVE EFFICIENCY: {reduction:.1f}x reduction may require validation",
    DiagnosticCode.RAW_CAPACITY_MET:
        "ESA NVMe storage requirement met",
    DiagnosticCode.HOST_COUNT_SUPPORTED:
        "ESA host count within supported range",
    DiagnosticCode.ADAPTIVE_SCHEME_SUPPORTED:
        "ESA adaptive {encoding} configuration supported",
}

ParamValue = Union[int, float, str]


class Diagnostic(BaseModel):
    """A validation or estimation finding with the values that produced it"""
    model_config = ConfigDict(frozen=True)

    code: DiagnosticCode
    params: Dict[str, ParamValue] = Field(default_factory=dict)

    @computed_field
    @property
    def severity(self) -> Severity:
        return _SEVERITY[self.code]

    @computed_field
    @property
    def message(self) -> str:
        return render(self)


class _DiagnosticFormatter(string.Formatter):
    """Bare float placeholders print the value as entered: 600.0 -> 600, 500.123456 unchanged."""

    def format_field(self, value, format_spec):
        if not format_spec and isinstance(value, float):
            return plain_number(value)
        return super().format_field(value, format_spec)


_formatter = _DiagnosticFormatter()


def plain_number(value: float) -> str:
    if value.is_integer():
        return str(int(value))
    return repr(value)


def render(diagnostic: Diagnostic) -> str:
    return _formatter.format(_TEMPLATES[diagnostic.code], **diagnostic.params)


def render_all(diagnostics: Iterable[Diagnostic], severity: Severity) -> List[str]:
    """Render the diagnostics of one severity, preserving order."""
    return [render(d) for d in diagnostics if d.severity == severity]


def format_number(value: float, decimals: int = 1) -> str:
    return f"{float(value):.{decimals}f}"
