"""Reconciliation — keep the remote copy aligned with declared content models.

This package provides the primitives for:
- Mapping: drafting remote payloads and importing remote state
- Drift detection: deciding whether the remote already matches the declaration
- Stores: the read/write contract of the remote system
- Reconciling: planning and applying one read, compare, write cycle
"""
