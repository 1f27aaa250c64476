"""
Subsystem tags prefixed to log messages.
"""

REWRITE = "[REWRITE]"
DISPATCH = "[DISPATCH]"
PREDICATE = "[PREDICATE]"
LOADER = "[LOADER]"
CLI = "[CLI]"
SERVER = "[SERVER]"
