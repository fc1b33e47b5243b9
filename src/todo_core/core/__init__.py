"""Core primitives shared by the task subsystem (live streams, ports, app state)."""
