"""
taskline: a local, single-user task tracker.

Packages:
- tasks/: task records, SQLite storage, query service, fuzzy search, validation
- core/: ports (storage contract) and application state
- cli/: composition root, slash commands, entry point
- connectors/: interactive console loop
"""

__version__ = "0.1.0"
