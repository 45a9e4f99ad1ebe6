from pairmap.models.cabling import Cable, CableRole, Circuit, Splice  # noqa: F401
