"""
requant Correctness Testing

Reference integer output stages and correctness utilities.
"""
from tests.correctness.reference import (
    float_requantize,
    reference_requantize,
)

__all__ = [
    "float_requantize",
    "reference_requantize",
]
