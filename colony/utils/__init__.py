"""Utilities: logging setup, event log, replay recording."""

from colony.utils.event_log import EventLog, SimEvent
from colony.utils.logging import setup_logging

__all__ = ["EventLog", "SimEvent", "setup_logging"]
