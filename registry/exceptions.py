"""
Fabric Network Topology - Registry Exceptions

This module defines the exceptions raised by the persisted registries and the
file operations underneath them.
"""

from typing import Optional, Union
from pathlib import Path


class RegistryError(Exception):
    """Base exception for all registry errors."""
    pass


class EntryNotFoundError(RegistryError):
    """Raised when a lookup finds no matching registry entry."""

    def __init__(self, registry_name: str, name: str, from_environment: Optional[str] = None):
        self.registry_name = registry_name
        self.name = name
        self.from_environment = from_environment
        if from_environment:
            message = (f'Entry "{name}" from environment "{from_environment}" '
                       f'in registry "{registry_name}" does not exist')
        else:
            message = f'Entry "{name}" in registry "{registry_name}" does not exist'
        super().__init__(message)


class EntryExistsError(RegistryError):
    """Raised when adding an entry whose name is already registered."""

    def __init__(self, registry_name: str, name: str):
        self.registry_name = registry_name
        self.name = name
        super().__init__(f'Entry "{name}" in registry "{registry_name}" already exists')


class StorageError(RegistryError):
    """Raised when a file operation on the backing store fails."""

    def __init__(self, message: str, source: Optional[Union[str, Path]] = None,
                 destination: Optional[Union[str, Path]] = None):
        self.source = str(source) if source is not None else None
        self.destination = str(destination) if destination is not None else None
        if self.source and self.destination:
            message = f"{message} (from {self.source} to {self.destination})"
        elif self.source:
            message = f"{message} ({self.source})"
        super().__init__(message)
