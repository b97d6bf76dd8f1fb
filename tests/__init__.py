"""
Test suite for the token ledger and pause guard

Contains:
- tests/unit/          : Unit tests for individual modules
"""
