"""
Core domain models, checked arithmetic, event contracts and invariants.

This module contains the foundational building blocks shared by the ledger
and guard components; it is independent of any composing contract.
"""
