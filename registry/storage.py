"""
Fabric Network Topology - Registry Storage Backend

This module provides the file-per-record persisted registry and the JSON file
operations shared by the registries and environments. Every write goes to a
temporary sibling file which is then renamed into place.
"""

import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar, Union

from pydantic import ValidationError

from .exceptions import EntryExistsError, EntryNotFoundError, StorageError
from .schema import RegistryEntry


logger = logging.getLogger(__name__)

EntryT = TypeVar('EntryT', bound=RegistryEntry)

RegistryListener = Callable[[str], None]


def read_json(path: Union[str, Path]) -> Any:
    """Read and deserialize a JSON file."""
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise StorageError(f"Invalid JSON data: {e}", path)
    except OSError as e:
        raise StorageError(f"Failed to read file: {e}", path)


def write_json(path: Union[str, Path], data: Any) -> None:
    """Write data to a JSON file atomically, creating parent directories."""
    path = Path(path)
    temp_file = path.with_name(path.name + '.tmp')

    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(temp_file, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2)
        os.replace(temp_file, path)

    except (OSError, TypeError, ValueError) as e:
        if temp_file.exists():
            temp_file.unlink()
        raise StorageError(f"Failed to write file: {e}", path)

    logger.debug(f"Wrote {path}")


def move_path(source: Union[str, Path], destination: Union[str, Path]) -> None:
    """Move a file or directory; the source is left in place if the move fails."""
    source, destination = Path(source), Path(destination)
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source), str(destination))
    except OSError as e:
        raise StorageError(f"Failed to move: {e}", source, destination)

    logger.info(f"Moved {source} to {destination}")


def remove_path(path: Union[str, Path]) -> None:
    """Remove a file or directory tree; missing paths are ignored."""
    path = Path(path)
    try:
        if path.is_dir():
            shutil.rmtree(path)
        elif path.exists():
            path.unlink()
    except OSError as e:
        raise StorageError(f"Failed to remove: {e}", path)


def list_visible(directory: Union[str, Path]) -> List[Path]:
    """Sorted children of a directory, skipping dotfiles. Missing directory gives []."""
    directory = Path(directory)
    if not directory.is_dir():
        return []
    return sorted(p for p in directory.iterdir() if not p.name.startswith('.'))


class FileRegistry(Generic[EntryT]):
    """
    Keyed collection of entries backed by one file per entry.

    Each entry lives at ``<storage_dir>/<registry_name>/<name>/.config.json``.
    Nothing is cached in memory: every read goes back to disk, so files edited
    outside this process are visible on the next call.
    """

    FILE_NAME = '.config.json'

    def __init__(self, storage_dir: Union[str, Path], registry_name: str,
                 entry_model: Type[EntryT]):
        self.storage_dir = Path(storage_dir)
        self.registry_name = registry_name
        self.entry_model = entry_model
        self.logger = logging.getLogger(__name__)
        self._listeners: List[RegistryListener] = []

    @property
    def registry_path(self) -> Path:
        return self.storage_dir / self.registry_name

    def subscribe(self, listener: RegistryListener) -> None:
        """Register a callback invoked with the registry name after each write."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: RegistryListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self.registry_name)
            except Exception as e:
                self.logger.error(f"Registry listener failed for {self.registry_name}: {e}")

    def _load_entries(self) -> List[EntryT]:
        """Entries stored directly in this registry's directory."""
        entries = []
        for entry_dir in list_visible(self.registry_path):
            entry_path = entry_dir / self.FILE_NAME
            if not entry_path.is_file():
                continue
            data = read_json(entry_path)
            try:
                entries.append(self.entry_model.model_validate(data))
            except ValidationError as e:
                raise StorageError(f"Invalid {self.registry_name} entry: {e}", entry_path)
        return entries

    def get_entries(self) -> List[EntryT]:
        """All entries visible through this registry."""
        return self._load_entries()

    def get_all(self) -> List[EntryT]:
        return self.get_entries()

    def get(self, name: str) -> EntryT:
        for entry in self.get_entries():
            if entry.name == name:
                return entry
        raise EntryNotFoundError(self.registry_name, name)

    def exists(self, name: str) -> bool:
        return any(entry.name == name for entry in self._load_entries())

    def add(self, entry: EntryT) -> None:
        if self.exists(entry.name):
            raise EntryExistsError(self.registry_name, entry.name)
        self._write_entry(entry)

    def update(self, entry: EntryT) -> None:
        if not self.exists(entry.name):
            raise EntryNotFoundError(self.registry_name, entry.name)
        self._write_entry(entry)

    def delete(self, name: str, ignore_not_exists: bool = False) -> None:
        if not self.exists(name):
            if ignore_not_exists:
                return
            raise EntryNotFoundError(self.registry_name, name)

        remove_path(self.registry_path / name)
        self.logger.info(f"Deleted {name} from registry {self.registry_name}")
        self._notify()

    def clear(self) -> None:
        """Empty the registry directory."""
        if self.registry_path.is_dir():
            for child in sorted(self.registry_path.iterdir()):
                remove_path(child)
        self._notify()

    def entry_path(self, name: str) -> Path:
        return self.registry_path / name / self.FILE_NAME

    def _write_entry(self, entry: EntryT, path: Optional[Path] = None) -> None:
        write_json(path or self.entry_path(entry.name), entry.to_dict())
        self._notify()
