"""PhotoVault backend: folders, photos and tags over SQL plus an object store."""

__version__ = "1.0.0"
