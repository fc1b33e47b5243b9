"""
Task subsystem.

Components:
- task_models.py: the Task record
- task_store.py: SQLite-backed storage with a live query
- coordinator.py: command sequencing + highlight lifecycle
"""
