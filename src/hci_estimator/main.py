"""
FastAPI application for the HCI Capacity Estimator.

This module exposes the validation and estimation functions as JSON
endpoints. Rendering forms and charts is left to the client.
"""

import logging

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from typing import Optional

from .exceptions import EmptyDatasetError
from .models import EstimationRequest, ScalingMode
from .report import build_report
from .estimation import estimate
from .scaling import domain_scaling_factor
from .tables import DEFAULT_SCALING_MODE, DEFAULT_TABLES
from .validation import available_schemes, validate

logger = logging.getLogger(__name__)

app = FastAPI(
    title="HCI Capacity Estimator",
    description="Estimate net effective capacity of a hyperconverged storage cluster from declared workloads"
)

tables = DEFAULT_TABLES


def _rejected(report):
    logger.warning("Estimation rejected: %s", "; ".join(report.errors))
    return JSONResponse({
        "error": "invalid_configuration",
        "message": "Configuration errors block the estimation",
        "errors": report.errors,
        "warnings": report.warnings
    }, status_code=422)


def _empty_dataset(e: EmptyDatasetError):
    logger.warning("Estimation failed: %s", e)
    return JSONResponse({
        "error": "empty_dataset",
        "message": str(e)
    }, status_code=400)


@app.get("/api/tables")
async def get_tables():
    """Reference tables used by validation and estimation."""
    return tables


@app.get("/api/schemes")
async def get_schemes(hosts: int, current: Optional[str] = None):
    """Redundancy schemes available for a host count."""
    return available_schemes(hosts, current, tables)


@app.get("/api/domain-scaling")
async def get_domain_scaling(hosts: int, mode: ScalingMode = DEFAULT_SCALING_MODE):
    """Deduplication domain effectiveness for a cluster size."""
    return {
        "hosts": hosts,
        "mode": mode,
        "factor": domain_scaling_factor(hosts, mode, tables)
    }


@app.post("/api/validate")
async def api_validate(request: EstimationRequest):
    """Validate a configuration without estimating."""
    return validate(request.cluster, request.workloads, tables)


@app.post("/api/estimate")
async def api_estimate(request: EstimationRequest):
    """Validate, then estimate capacity for a configuration."""
    report = validate(request.cluster, request.workloads, tables)
    if report.has_errors:
        return _rejected(report)
    try:
        return estimate(request.cluster, request.workloads, tables)
    except EmptyDatasetError as e:
        return _empty_dataset(e)


@app.post("/api/estimate/report")
async def api_estimate_report(request: EstimationRequest):
    """Estimate capacity and return breakdown tables and chart series."""
    report = validate(request.cluster, request.workloads, tables)
    if report.has_errors:
        return _rejected(report)
    try:
        result = estimate(request.cluster, request.workloads, tables)
    except EmptyDatasetError as e:
        return _empty_dataset(e)
    return build_report(result)


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    uvicorn.run(app, host="0.0.0.0", port=8000)
