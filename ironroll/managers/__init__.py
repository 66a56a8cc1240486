"""Manager classes that observe the combat engine through events."""

from .log_manager import LogCategory, LogEntry, LogLevel, LogManager

__all__ = ["LogCategory", "LogEntry", "LogLevel", "LogManager"]
