"""User-facing connectors (currently: the interactive console)."""
