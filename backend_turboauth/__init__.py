"""
Backend TurboAuth — wallet authorization registry.

Tracks an authentication status and trust score per Qubic wallet identity,
gated by a single admin, with an upgrade pointer to a successor contract.
"""

__version__ = "0.1.0"
