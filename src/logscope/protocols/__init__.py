"""
Collaborator protocols and configuration hooks.
"""

from .log_manager import LogManagerProtocol, register_log_manager, get_log_manager
from .session_config import LogSessionConfig, set_session_config, get_session_config

__all__ = [
    "LogManagerProtocol",
    "register_log_manager",
    "get_log_manager",
    "LogSessionConfig",
    "set_session_config",
    "get_session_config",
]
