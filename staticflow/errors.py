"""Exceptions raised by the staticflow build pipeline."""


class StaticflowError(Exception):
    """Base class for errors the command line reports without a traceback."""


class ConfigError(StaticflowError):
    """Raised when a configuration file cannot be read or has the wrong shape."""


class ComponentsNotFoundError(StaticflowError):
    """Raised when the components directory is missing at build start."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Components directory not found: {path}")
