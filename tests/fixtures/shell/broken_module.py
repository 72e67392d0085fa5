"""Module whose execution always fails."""

raise RuntimeError("broken on import")
