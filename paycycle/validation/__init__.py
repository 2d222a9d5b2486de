"""Snapshot validation package."""

from paycycle.validation.validator import SnapshotValidator

__all__ = ["SnapshotValidator"]
