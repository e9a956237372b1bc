"""Per-user shopping list sessions.

Layout:
    sessions/
    ├── 123456789.json      # One file per user identifier
    └── cli.json            # {"foodList": [...], "sections": [{"name", "items"}]}

Sessions are plain dataclasses; the store owns serialization and the
shopping_list module owns every mutation of a session's contents.
"""
