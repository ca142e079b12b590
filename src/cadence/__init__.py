"""Cadence - real-time completion-session orchestrator."""

__version__ = "0.1.0"
