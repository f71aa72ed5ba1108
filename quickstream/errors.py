"""Error types"""


class QuickStreamError(Exception):
    """Base class for recoverable errors. None of these end the session."""


class ConfigParseError(QuickStreamError):
    """The config file exists but is not a valid record."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Error parsing config {path}: {reason}")


class ConfigWriteError(QuickStreamError):
    """The config file could not be written."""

    def __init__(self, path, reason):
        self.path = path
        self.reason = reason
        super().__init__(f"Error saving config {path}: {reason}")


class SpawnError(QuickStreamError):
    """The encoder could not be started."""

    def __init__(self, command, reason):
        self.command = command
        self.reason = reason
        super().__init__(f"Failed to start {command[0] if command else 'encoder'}: {reason}")
