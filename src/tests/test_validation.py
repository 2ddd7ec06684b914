"""
Unit tests for input validation, scheme availability and the input models.
"""

import pytest
from pydantic import ValidationError

from hci_estimator.diagnostics import Diagnostic, DiagnosticCode, Severity
from hci_estimator.models import ClusterConfig, EstimationRequest, WorkloadItem
from hci_estimator.tables import DomainTables, PlatformLimits
from hci_estimator.validation import available_schemes, validate


def issue_codes(report):
    return [i.code for i in report.issues]


@pytest.fixture
def workloads():
    return [
        WorkloadItem(id="vdi", type="full_clone_vdi", logical_tib=80, cold_pct=0.85),
        WorkloadItem(id="files", type="unstructured", logical_tib=100, cold_pct=0.7),
    ]


class TestValidationErrors:
    """Test conditions that block the estimation."""

    def test_valid_configuration(self, workloads):
        report = validate(ClusterConfig(hosts=6, raw_tib_per_host=20), workloads)
        assert report.errors == []
        assert report.warnings == []
        assert not report.has_errors

    def test_below_quorum(self, workloads):
        """Two hosts cannot form a quorum."""
        report = validate(ClusterConfig(hosts=2, raw_tib_per_host=20), workloads)
        assert report.has_errors
        assert DiagnosticCode.HOSTS_BELOW_QUORUM in issue_codes(report)
        assert "vSAN ESA requires minimum 3 hosts for quorum." in report.errors

    def test_above_max_hosts(self, workloads):
        report = validate(ClusterConfig(hosts=65, raw_tib_per_host=20), workloads)
        assert "vSAN ESA supports maximum 64 hosts per cluster." in report.errors

    @pytest.mark.parametrize("hosts", range(3, 9))
    def test_raid6_minimum_hosts(self, workloads, hosts):
        """The RAID-6 error appears exactly when hosts < 6."""
        report = validate(ClusterConfig(hosts=hosts, raw_tib_per_host=20, redundancy_scheme="raid6"), workloads)
        has_error = DiagnosticCode.SCHEME_MIN_HOSTS in issue_codes(report)
        assert has_error == (hosts < 6)
        if has_error:
            assert "RAID-6 Erasure Coding (FTT=2) requires minimum 6 hosts." in report.errors

    def test_unknown_scheme_has_no_host_requirement(self, workloads):
        report = validate(ClusterConfig(hosts=3, raw_tib_per_host=20, redundancy_scheme="raid10"), workloads)
        assert report.errors == []

    def test_raw_capacity_below_minimum(self, workloads):
        report = validate(ClusterConfig(hosts=6, raw_tib_per_host=1.0), workloads)
        assert report.errors == ["ESA requires minimum 1.6 TiB NVMe per host."]

    def test_empty_dataset(self):
        workloads = [WorkloadItem(id=str(i), logical_tib=0) for i in range(3)]
        report = validate(ClusterConfig(hosts=6, raw_tib_per_host=20), workloads)
        assert report.errors == ["Total logical dataset must be > 0."]

    def test_no_workloads(self):
        report = validate(ClusterConfig(hosts=6, raw_tib_per_host=20), [])
        assert DiagnosticCode.EMPTY_DATASET in issue_codes(report)

    def test_injected_limits(self, workloads):
        """Alternate tables change the limits validated against."""
        tables = DomainTables(limits=PlatformLimits(max_hosts=16))
        report = validate(ClusterConfig(hosts=20, raw_tib_per_host=20), workloads, tables)
        assert "vSAN ESA supports maximum 16 hosts per cluster." in report.errors


class TestValidationWarnings:
    """Test advisory conditions that do not block the estimation."""

    def test_raw_capacity_above_tested(self, workloads):
        report = validate(ClusterConfig(hosts=6, raw_tib_per_host=600), workloads)
        assert not report.has_errors
        assert report.warnings == ["600 TiB per host exceeds typical ESA configurations (500 TiB max tested)."]

    def test_vm_density(self):
        """4000 TiB at 2 TiB per VM is 2000 VMs, above 3 x 500."""
        workloads = [WorkloadItem(id="big", logical_tib=4000)]
        report = validate(ClusterConfig(hosts=3, raw_tib_per_host=400), workloads)
        assert not report.has_errors
        assert report.warnings == ["Estimated 2000 VMs may exceed ESA limit of 500 VMs per host."]

    def test_vm_density_within_limit(self):
        workloads = [WorkloadItem(id="big", logical_tib=3000)]
        report = validate(ClusterConfig(hosts=3, raw_tib_per_host=400), workloads)
        assert report.warnings == []

    def test_warnings_are_not_errors(self, workloads):
        report = validate(ClusterConfig(hosts=6, raw_tib_per_host=600), workloads)
        assert all(i.severity == Severity.WARNING for i in report.issues)


class TestSchemeAvailability:
    """Test redundancy scheme selection by host count."""

    def test_three_hosts(self):
        availability = available_schemes(3)
        assert [s.key for s in availability.available] == ["raid1", "raid5"]
        assert availability.selected == "raid5"
        assert availability.limitation_messages == [
            "RAID-6 Erasure Coding (FTT=2) requires minimum 6 hosts (ESA 4+2 Erasure Coding)"
        ]

    def test_keeps_current_selection(self):
        assert available_schemes(6, "raid6").selected == "raid6"
        assert available_schemes(6, "raid1").selected == "raid1"

    def test_replaces_unavailable_selection(self):
        assert available_schemes(4, "raid6").selected == "raid5"

    def test_no_scheme_available(self):
        availability = available_schemes(2)
        assert availability.available == []
        assert availability.selected is None
        assert len(availability.limitations) == 3


class TestInputModels:
    """Test input coercion and schema validation."""

    def test_unparseable_numbers_fall_back_to_zero(self):
        item = WorkloadItem(id="a", logical_tib="abc", cold_pct="")
        assert item.logical_tib == 0
        assert item.cold_pct == 0

    def test_numeric_strings_are_parsed(self):
        item = WorkloadItem(id="a", logical_tib="42.5", cold_pct="0.3")
        assert item.logical_tib == 42.5
        assert item.cold_pct == 0.3

    def test_blank_type_defaults_to_unstructured(self):
        assert WorkloadItem(id="a", type="  ").type == "unstructured"

    def test_generated_ids_are_unique(self):
        assert WorkloadItem().id != WorkloadItem().id

    def test_negative_logical_size_rejected(self):
        with pytest.raises(ValidationError):
            WorkloadItem(id="a", logical_tib=-1)

    def test_cold_ratio_out_of_range_rejected(self):
        with pytest.raises(ValidationError):
            WorkloadItem(id="a", cold_pct=1.5)

    @pytest.mark.parametrize("value", ["inf", "1e400", float("inf"), "-inf"])
    def test_infinite_logical_size_rejected(self, value):
        with pytest.raises(ValidationError):
            WorkloadItem(id="a", logical_tib=value)

    def test_nan_falls_back_to_zero(self):
        assert WorkloadItem(id="a", logical_tib=float("nan")).logical_tib == 0

    def test_oversized_capacities_rejected(self):
        """Values large enough to overflow derived capacities are refused."""
        with pytest.raises(ValidationError):
            WorkloadItem(id="a", logical_tib=1.7e308)
        with pytest.raises(ValidationError):
            ClusterConfig(raw_tib_per_host=1.7e308)
        with pytest.raises(ValidationError):
            ClusterConfig(raw_tib_per_host=float("inf"))
        with pytest.raises(ValidationError):
            ClusterConfig(lfs_overhead_percent=float("inf"))

    def test_largest_accepted_inputs_stay_finite(self):
        config = ClusterConfig(hosts=64, raw_tib_per_host=1e12)
        workloads = [WorkloadItem(id=str(i), logical_tib=1e12, cold_pct=1.0) for i in range(10)]

        report = validate(config, workloads)

        assert not report.has_errors
        assert DiagnosticCode.RAW_CAPACITY_ABOVE_TESTED in issue_codes(report)

    def test_unknown_domain_mode_rejected(self):
        with pytest.raises(ValidationError):
            ClusterConfig(domain_mode="reckless")

    def test_config_is_immutable(self):
        config = ClusterConfig()
        with pytest.raises(ValidationError):
            config.hosts = 12

    def test_config_defaults(self):
        config = ClusterConfig()
        assert config.redundancy_scheme == "raid5"
        assert config.domain_mode == "typical"
        assert config.lfs_overhead_rate == pytest.approx(0.131)
        assert config.checksum_rate == pytest.approx(0.02)
        assert config.total_raw_capacity == pytest.approx(120)

    def test_duplicate_workload_ids_rejected(self):
        with pytest.raises(ValidationError, match="Workload ids must be unique"):
            EstimationRequest(workloads=[WorkloadItem(id="a"), WorkloadItem(id="a")])

    def test_request_total(self, workloads):
        assert EstimationRequest(workloads=workloads).total_logical_tib == pytest.approx(180)


class TestDiagnosticRendering:
    """Test rendering of structured diagnostics."""

    def test_message_and_severity(self):
        d = Diagnostic(code=DiagnosticCode.HIGH_UTILIZATION, params={"utilization": 91.234, "threshold": 85.0})
        assert d.severity == Severity.WARNING
        assert d.message == "HIGH UTILIZATION: 91.2% of usable capacity (ESA recommends <85%)"

    @pytest.mark.parametrize("raw,text", [
        (600.0, "600"),
        (1234567.0, "1234567"),
        (500.123456, "500.123456"),
    ])
    def test_numbers_render_as_entered(self, raw, text):
        d = Diagnostic(code=DiagnosticCode.RAW_CAPACITY_ABOVE_TESTED, params={"raw_tib": raw, "max_tib": 500.0})
        assert d.message == f"{text} TiB per host exceeds typical ESA configurations (500 TiB max tested)."

    def test_minimum_capacity_renders_as_entered(self):
        d = Diagnostic(code=DiagnosticCode.RAW_CAPACITY_BELOW_MIN, params={"min_tib": 1.6, "raw_tib": 1.0})
        assert d.message == "ESA requires minimum 1.6 TiB NVMe per host."

    def test_serialized_with_message(self):
        d = Diagnostic(code=DiagnosticCode.RAW_CAPACITY_MET)
        data = d.model_dump(mode="json")
        assert data["code"] == "raw_capacity_met"
        assert data["severity"] == "compliance"
        assert data["message"] == "ESA NVMe storage requirement met"
