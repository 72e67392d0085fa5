"""Known command names."""

COMMANDS: tuple[str, ...] = ("ls", "echo")
