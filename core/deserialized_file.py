# core/deserialized_file.py

"""The reconstructed (deserialized) output file."""
import os
from pathlib import Path

from core.errors import CacheIOError, PathError


class DeserializedFile:
    """
    A freshly created output file. It is opened with exclusive-create
    semantics, so an existing path is never touched.
    """

    def __init__(self, name: str, file):
        self.name = name
        self.file = file

    @classmethod
    def from_path(cls, path: Path) -> 'DeserializedFile':
        path = Path(path)
        name = str(path)
        if path.exists():
            raise PathError(f"'{name}' already exists")
        try:
            file = path.open('xb')
        except FileExistsError as e:
            raise PathError(f"'{name}' already exists") from e
        except OSError as e:
            raise PathError(f"failed to create '{name}' for writing: {e}") from e
        return cls(name, file)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    @property
    def closed(self) -> bool:
        return self.file.closed

    def close(self):
        self.file.close()

    def write_at(self, offset: int, data: bytes):
        """Writes data at an absolute offset, extending the file as needed."""
        try:
            self.file.seek(offset, os.SEEK_SET)
        except (OSError, ValueError) as e:
            raise CacheIOError(f"failed to seek '{self.name}' at offset={offset}: {e}",
                               name=self.name, offset=offset, operation="seek") from e
        try:
            self.file.write(data)
        except (OSError, ValueError) as e:
            raise CacheIOError(f"failed to write part(size={len(data)}) to '{self.name}'@{offset}: {e}",
                               name=self.name, offset=offset, operation="write") from e

    def truncate(self, size: int):
        try:
            self.file.truncate(size)
            self.file.seek(size, os.SEEK_SET)
        except (OSError, ValueError) as e:
            raise CacheIOError(f"failed to truncate '{self.name}' at offset={size}: {e}",
                               name=self.name, offset=size, operation="truncate") from e

    def size(self) -> int:
        try:
            self.file.flush()
            return os.fstat(self.file.fileno()).st_size
        except (OSError, ValueError) as e:
            raise CacheIOError(f"failed to get size of '{self.name}': {e}",
                               name=self.name, operation="stat") from e
