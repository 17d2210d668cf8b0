class TrackerError(Exception):
    """Base class for every failure surfaced to the user."""


class NotLoggedIn(TrackerError):
    def __init__(self, message="Not logged in. Run `tte login`."):
        super().__init__(message)


class AccountDeleted(TrackerError):
    def __init__(self, message="Your account has been deleted. Create a new one by running `tte login`."):
        super().__init__(message)


class ProjectNotFound(TrackerError):
    def __init__(self, name=None):
        self.name = name
        if name is None:
            message = "No default project set. Run `tte project default <name>`."
        else:
            message = f"Project not found: {name}"
        super().__init__(message)


class AmbiguousProject(TrackerError):
    def __init__(self, name=None, count=2):
        self.name = name
        self.count = count
        if name is None:
            message = f"{count} projects are marked as default."
        else:
            message = f"Multiple projects with that name: {name} ({count})"
        super().__init__(message)


class StoreUnavailable(TrackerError):
    """The remote store could not be reached or rejected the query."""


class ConfigIOError(TrackerError):
    """The local session record could not be read or written."""
