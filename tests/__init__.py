"""
Test Suite for the Budget Ledger

Test Structure:
- unit/: Unit tests mirroring the src/ package structure
- integration/: CLI workflows against a temporary JSON ledger

All tests run with LEDGER_ENV=test and a per-test data directory, so no real
ledger file is ever touched.
"""
