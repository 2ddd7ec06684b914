"""Errors raised by the HCI capacity estimator."""


class CapacityEstimatorError(Exception):
    """Base class for estimator failures"""


class EmptyDatasetError(CapacityEstimatorError, ValueError):
    """Raised when an estimation is requested with no logical data"""

    def __init__(self, message: str = "No workload data available"):
        super().__init__(message)
