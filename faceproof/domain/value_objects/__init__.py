"""Value objects package."""
from .verdicts import (
    OracleComparison,
    UniquenessStatus,
    UniquenessVerdict,
    ValidationVerdict,
)

__all__ = ["OracleComparison", "UniquenessStatus", "UniquenessVerdict", "ValidationVerdict"]
