"""Microfinance loan book: daily-collection loans, ledger and back office."""

__version__ = "0.1.0"
