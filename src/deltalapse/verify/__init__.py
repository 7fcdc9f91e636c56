"""
Verify Module
=============

Bit-exact comparison of an original and a reconstructed sequence.
"""

from deltalapse.verify.verifier import (
    DEFAULT_MAX_LOGGED_MISMATCHES,
    Verifier,
    compare,
)

__all__ = [
    "DEFAULT_MAX_LOGGED_MISMATCHES",
    "Verifier",
    "compare",
]
