"""
Task subsystem.

Components:
- task_models.py: data structures (Task, CategoryItem, RepeatRule) and input limits
- migrations.py: versioned persisted-document upgrades
- backing.py: key-value backings (JSON file, in-memory)
- task_store.py: TaskStore, CRUD + cascade operations with write-through persistence
- reminders.py: reminder time encoding, urgency and labels
- tagging.py: "#category" hashtag detection
- views.py: filter -> sort -> group pipeline for the five view modes
"""
