from tte.errors import AmbiguousProject, ProjectNotFound


class ProjectResolver:
    """Project lookups, always scoped to one user.

    Names are not unique: add() accepts duplicates, so resolve() refuses
    to pick between several matches instead of assuming one.
    """

    def __init__(self, repository):
        self.repository = repository

    def resolve(self, user_id, name=None):
        """Turn an optional project name into exactly one project.

        With a name, match it exactly; without one, use the user's default.
        Raises ProjectNotFound on no match and AmbiguousProject on several.
        """
        candidates = self.repository.find_projects_for_start(user_id, name)
        if not candidates:
            raise ProjectNotFound(name)
        if len(candidates) > 1:
            raise AmbiguousProject(name, len(candidates))
        return candidates[0]

    def list(self, user_id):
        return self.repository.list_projects(user_id)

    def add(self, user_id, name):
        project_id = self.repository.create_project(user_id, name)
        return {"id": project_id, "name": name, "is_default": False}

    def remove(self, user_id, name):
        return self.repository.delete_projects_by_name(user_id, name)

    def set_default(self, user_id, name):
        """Returns False when the user has no such project; the old default stays."""
        return self.repository.set_default_project(user_id, name)
