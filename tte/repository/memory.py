import uuid
from datetime import datetime, timezone

from tte.repository.base import Repository


def _utcnow():
    return datetime.now(timezone.utc)


class MemoryRepository(Repository):
    """In-process repository.

    Mirrors the EdgeDB schema: deleting a project deletes its entries, and
    each user designates at most one default project. `clock` stands in for
    the server's datetime_of_statement().
    """

    def __init__(self, clock=None):
        self.clock = clock or _utcnow
        self.users = {}       # id -> secret
        self.projects = []    # {"id", "name", "owner"}, insertion order
        self.defaults = {}    # user id -> project id
        self.entries = []     # {"id", "project", "start_at", "stop_at"}, insertion order

    def find_user_by_secret(self, secret):
        for user_id, stored in self.users.items():
            if stored == secret:
                return user_id
        return None

    def create_user(self, secret):
        user_id = uuid.uuid4()
        self.users[user_id] = secret
        return user_id

    def user_exists(self, user_id):
        return user_id in self.users

    def delete_user(self, user_id):
        """Remove a user with everything it owns, the way an admin would out-of-band."""
        self.users.pop(user_id, None)
        self.defaults.pop(user_id, None)
        owned = {p["id"] for p in self.projects if p["owner"] == user_id}
        self.projects = [p for p in self.projects if p["id"] not in owned]
        self.entries = [e for e in self.entries if e["project"] not in owned]

    def list_projects(self, user_id):
        owned = [p for p in self.projects if p["owner"] == user_id]
        owned.sort(key=lambda p: (p["name"], str(p["id"])))
        return [self._view(p) for p in owned]

    def create_project(self, user_id, name):
        project_id = uuid.uuid4()
        self.projects.append({"id": project_id, "name": name, "owner": user_id})
        return project_id

    def delete_projects_by_name(self, user_id, name):
        doomed = {p["id"] for p in self.projects if p["owner"] == user_id and p["name"] == name}
        self.projects = [p for p in self.projects if p["id"] not in doomed]
        self.entries = [e for e in self.entries if e["project"] not in doomed]
        if self.defaults.get(user_id) in doomed:
            del self.defaults[user_id]
        return len(doomed)

    def set_default_project(self, user_id, name):
        for p in self.projects:
            if p["owner"] == user_id and p["name"] == name:
                self.defaults[user_id] = p["id"]
                return True
        return False

    def find_projects_for_start(self, user_id, name=None):
        owned = [p for p in self.projects if p["owner"] == user_id]
        if name is None:
            matches = [p for p in owned if self.defaults.get(user_id) == p["id"]]
        else:
            matches = [p for p in owned if p["name"] == name]
        return [self._view(p) for p in matches]

    def stop_all_active(self, user_id):
        now = self.clock()
        stopped = 0
        for entry in self._owned_entries(user_id):
            if entry["stop_at"] is None:
                entry["stop_at"] = now
                stopped += 1
        return stopped

    def create_entry(self, user_id, project_id):
        owner = next((p["owner"] for p in self.projects if p["id"] == project_id), None)
        if owner != user_id:
            raise ValueError(f"Project {project_id} not found")
        entry_id = uuid.uuid4()
        self.entries.append({
            "id": entry_id,
            "project": project_id,
            "start_at": self.clock(),
            "stop_at": None,
        })
        return entry_id

    def list_entries(self, user_id):
        now = self.clock()
        names = {p["id"]: p["name"] for p in self.projects}
        return [
            {
                "id": e["id"],
                "start_at": e["start_at"],
                "stop_at": e["stop_at"],
                "duration": (e["stop_at"] or now) - e["start_at"],
                "project_name": names[e["project"]],
            }
            for e in self._owned_entries(user_id)
        ]

    def _owned_entries(self, user_id):
        owned = {p["id"] for p in self.projects if p["owner"] == user_id}
        return [e for e in self.entries if e["project"] in owned]

    def _view(self, project):
        return {
            "id": project["id"],
            "name": project["name"],
            "is_default": self.defaults.get(project["owner"]) == project["id"],
        }
