"""
Persistence for Gatecord.

- **ban_list_pointer_repo.py**: JSON file remembering which message in the
  ban channel is the ban list, so it is edited instead of re-posted.
"""
