"""EdgeDB-backed repository.

Every operation is a single EdgeQL statement against the schema in
dbschema/default.esdl. Timestamps come from datetime_of_statement() so
start/stop ordering follows the server clock, not the client's.

Connection settings are read by the EdgeDB client from the environment
(EDGEDB_DSN, EDGEDB_INSTANCE, ...), see `tte auth`.
"""

import edgedb

from tte.errors import StoreUnavailable
from tte.repository.base import Repository

_PROJECT_SHAPE = """
    Project {
        id,
        name,
        is_default := <uuid>$0 IN .<default_project[IS User].id
    }
"""

_LIST_PROJECTS = f"""
    SELECT {_PROJECT_SHAPE}
    FILTER .owner.id = <uuid>$0
    ORDER BY .name THEN .id
"""

_PROJECTS_BY_NAME = f"""
    SELECT {_PROJECT_SHAPE}
    FILTER .owner.id = <uuid>$0 AND .name = <str>$1
"""

_DEFAULT_PROJECTS = f"""
    SELECT {_PROJECT_SHAPE}
    FILTER .owner.id = <uuid>$0 AND <uuid>$0 IN .<default_project[IS User].id
"""

_SET_DEFAULT = """
    WITH project := (
        SELECT Project
        FILTER .name = <str>$0 AND .owner.id = <uuid>$1
        LIMIT 1
    )
    SELECT count((
        UPDATE User
        FILTER .id = <uuid>$1 AND EXISTS project
        SET { default_project := project }
    ))
"""

_STOP_ALL = """
    SELECT count((
        UPDATE Entry
        FILTER .project.owner.id = <uuid>$0 AND NOT EXISTS .stop_at
        SET { stop_at := datetime_of_statement() }
    ))
"""

_CREATE_ENTRY = """
    SELECT (
        INSERT Entry {
            start_at := datetime_of_statement(),
            project := assert_exists(
                (SELECT Project FILTER .id = <uuid>$1 AND .owner.id = <uuid>$0),
                message := 'project not found'
            )
        }
    ) { id }
"""

_LIST_ENTRIES = """
    SELECT Entry {
        id,
        start_at,
        stop_at,
        duration := (.stop_at ?? datetime_of_statement()) - .start_at,
        project_name := .project.name
    }
    FILTER .project.owner.id = <uuid>$0
    ORDER BY .start_at THEN .id
"""


class EdgeDBRepository(Repository):
    """Repository backed by a remote EdgeDB instance."""

    def __init__(self, client=None):
        if client is None:
            try:
                client = edgedb.create_client()
            except edgedb.EdgeDBError as e:
                raise StoreUnavailable(f"Cannot connect to EdgeDB: {e}") from e
        self._client = client

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def find_user_by_secret(self, secret):
        user = self._run(
            "query_single",
            "SELECT User { id } FILTER .password = <str>$0 LIMIT 1",
            secret,
        )
        return user.id if user is not None else None

    def create_user(self, secret):
        user = self._run(
            "query_required_single",
            "SELECT (INSERT User { password := <str>$0 }) { id }",
            secret,
        )
        return user.id

    def user_exists(self, user_id):
        return self._run(
            "query_required_single",
            "SELECT EXISTS (SELECT User FILTER .id = <uuid>$0)",
            user_id,
        )

    # ------------------------------------------------------------------
    # Projects
    # ------------------------------------------------------------------

    def list_projects(self, user_id):
        return [_project(p) for p in self._run("query", _LIST_PROJECTS, user_id)]

    def create_project(self, user_id, name):
        project = self._run(
            "query_required_single",
            """SELECT (
                INSERT Project {
                    name := <str>$0,
                    owner := assert_exists((SELECT User FILTER .id = <uuid>$1))
                }
            ) { id }""",
            name, user_id,
        )
        return project.id

    def delete_projects_by_name(self, user_id, name):
        return self._run(
            "query_required_single",
            "SELECT count((DELETE Project FILTER .name = <str>$0 AND .owner.id = <uuid>$1))",
            name, user_id,
        )

    def set_default_project(self, user_id, name):
        return self._run("query_required_single", _SET_DEFAULT, name, user_id) > 0

    def find_projects_for_start(self, user_id, name=None):
        if name is None:
            rows = self._run("query", _DEFAULT_PROJECTS, user_id)
        else:
            rows = self._run("query", _PROJECTS_BY_NAME, user_id, name)
        return [_project(p) for p in rows]

    # ------------------------------------------------------------------
    # Entries
    # ------------------------------------------------------------------

    def stop_all_active(self, user_id):
        return self._run("query_required_single", _STOP_ALL, user_id)

    def create_entry(self, user_id, project_id):
        entry = self._run("query_required_single", _CREATE_ENTRY, user_id, project_id)
        return entry.id

    def list_entries(self, user_id):
        return [
            {
                "id": e.id,
                "start_at": e.start_at,
                "stop_at": e.stop_at,
                "duration": e.duration,
                "project_name": e.project_name,
            }
            for e in self._run("query", _LIST_ENTRIES, user_id)
        ]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _run(self, method, query, *args):
        """Run a query, turning any client or server failure into StoreUnavailable."""
        try:
            return getattr(self._client, method)(query, *args)
        except edgedb.EdgeDBError as e:
            raise StoreUnavailable(f"EdgeDB query failed: {e}") from e


def _project(row):
    return {"id": row.id, "name": row.name, "is_default": row.is_default}
