"""Declarative SNS topic deployment with attribute reconciliation."""

__version__ = "0.1.0"
