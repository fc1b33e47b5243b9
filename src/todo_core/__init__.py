"""
todo-core: a persisted task list with a live query and a transient
"just updated" highlight.

Subpackages:
- tasks: Task model, SQLite TaskStore, TaskCoordinator
- core: live sequences, ports, AppState
- cli / connectors: console front-end and process entry point
"""

__version__ = "0.1.0"
