"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskPatch)
- task_store.py: SQLite-backed storage + query helpers
- task_service.py: filter/sort/period queries and mutations over a TaskRepo
- task_search.py: weighted fuzzy search over a snapshot of tasks
- validation.py: entry-point checks for user-supplied fields
"""
