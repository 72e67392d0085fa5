"""Command shell implementation living behind a loading boundary."""

import shell_api


class ConsoleSession(shell_api.CommandSession):
    """Echoing session that records its history."""

    def __init__(self, owner: str) -> None:
        self._owner = owner
        self.closed = False
        self.history = []

    @property
    def owner(self) -> str:
        return self._owner

    def execute(self, command: str) -> object:
        self.history.append(command)
        if command == "fail":
            raise RuntimeError("command failed")
        return f"{self._owner}$ {command}"

    def close(self) -> None:
        self.closed = True


class ConsoleProcessor(shell_api.CommandProcessor):
    """Creates console sessions and keeps track of them."""

    def __init__(self) -> None:
        self.sessions = []

    def create_session(self, owner: str) -> shell_api.CommandSession:
        session = ConsoleSession(owner)
        self.sessions.append(session)
        return session
