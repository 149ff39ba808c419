"""
Log sources implementing LogManagerProtocol.
"""

from .memory_manager import InMemoryLogManager, LogCaptureHandler

__all__ = [
    "InMemoryLogManager",
    "LogCaptureHandler",
]
