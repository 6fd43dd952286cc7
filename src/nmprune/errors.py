"""Exception types for nmprune."""

from pathlib import Path


class NmpruneError(Exception):
    """Base class for errors that stop the pipeline."""


class ConfigError(NmpruneError):
    """Invalid configuration. Raised before any scan starts."""


class RootNotFoundError(ConfigError):
    """The scan root does not exist or is not a directory."""

    def __init__(self, root: Path, reason: str = "does not exist"):
        self.root = root
        super().__init__(f"Root path {root} {reason}")
