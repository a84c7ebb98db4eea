"""
elfscope Shared Module
======================

Configuration, logging and console helpers used by the elfscope engine,
output layer and CLI.
"""

from shared.config import ScopeConfig, get_config

__all__ = ["ScopeConfig", "get_config"]
