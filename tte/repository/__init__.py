from tte.errors import TrackerError


def create_repository(config=None):
    """Create a repository from config.

    Config keys:
        store_backend: "edgedb" (default, and the only durable backend)
    """
    config = config or {}
    backend = config.get("store_backend") or "edgedb"

    if backend == "edgedb":
        from tte.repository.edge import EdgeDBRepository
        return EdgeDBRepository()

    raise TrackerError(f"Unknown store backend: {backend!r}. Use 'edgedb'.")
