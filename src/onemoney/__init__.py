"""
OneMoney Transaction Signing
^^^^^^^^^^^^^^^^^^^^^^^^^^^^
Builds, canonically encodes, and signs OneMoney transactions, and turns
signed transactions into request bodies ready for submission.
"""

__version__ = "0.1.0"
