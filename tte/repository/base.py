from abc import ABC, abstractmethod


class Repository(ABC):
    """Base interface for the durable store behind the tracker.

    Implementations: EdgeDBRepository (remote), MemoryRepository (in-process).
    All timestamps are assigned by the store, never by the client clock.
    IDs are uuid.UUID values. Projects are dicts with id, name and is_default.
    """

    @abstractmethod
    def find_user_by_secret(self, secret):
        """Return the ID of the user with exactly this secret, or None."""
        pass

    @abstractmethod
    def create_user(self, secret):
        """Create a user with this secret. Returns the new user ID."""
        pass

    @abstractmethod
    def user_exists(self, user_id):
        pass

    @abstractmethod
    def list_projects(self, user_id):
        """List the user's projects in a stable order."""
        pass

    @abstractmethod
    def create_project(self, user_id, name):
        """Create a project owned by the user. Returns the project ID."""
        pass

    @abstractmethod
    def delete_projects_by_name(self, user_id, name):
        """Delete every project of the user with this name. Returns the count."""
        pass

    @abstractmethod
    def set_default_project(self, user_id, name):
        """Make the named project the user's only default.

        Returns False, leaving the designation alone, if the user has no
        project with that name.
        """
        pass

    @abstractmethod
    def find_projects_for_start(self, user_id, name=None):
        """Candidate projects for a new entry.

        With a name: the user's projects with that exact name.
        Without: the user's projects marked as default.
        """
        pass

    @abstractmethod
    def stop_all_active(self, user_id):
        """Stamp the current store time on every running entry. Returns the count."""
        pass

    @abstractmethod
    def create_entry(self, user_id, project_id):
        """Start a running entry on the project. Returns the entry ID."""
        pass

    @abstractmethod
    def list_entries(self, user_id):
        """List the user's entries in insertion order.

        Each entry is a dict with id, start_at, stop_at (None while running),
        duration (a timedelta measured against store time) and project_name.
        """
        pass
