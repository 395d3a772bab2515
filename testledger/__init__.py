"""Aggregate test reporter logs and submit them to Test Ledger."""

__version__ = '0.3.0'
