"""Entry lifecycle: at most one running entry per user.

start() stops every running entry and then creates the new one. These are
two separate store calls, not a transaction:

- if resolving the project fails, the stop has already happened and there
  is no running entry afterwards;
- two clients starting entries for the same user at the same time can
  interleave and leave two entries running.

Single-user, one-command-at-a-time use is assumed.
"""

from tte.projects import ProjectResolver


class EntryLifecycle:

    def __init__(self, repository, resolver=None):
        self.repository = repository
        self.resolver = resolver or ProjectResolver(repository)

    def stop_active(self, user_id):
        """Stop every running entry. Returns how many were stopped (0 is fine)."""
        return self.repository.stop_all_active(user_id)

    def start(self, user_id, project_name=None):
        """Stop the running entry, then start one on the resolved project.

        Returns (entry_id, project).
        """
        self.stop_active(user_id)
        project = self.resolver.resolve(user_id, project_name)
        entry_id = self.repository.create_entry(user_id, project["id"])
        return entry_id, project
