"""
File-access capability used by the $include instruction

The engine never touches the filesystem directly. It is handed an object
satisfying FileAccess, or None when file access is unavailable (for example
a sandboxed host), in which case $include is a fatal error.
"""

from pathlib import Path
from typing import Protocol, Union

from .log import LOG


class FileAccess(Protocol):
    """Capability boundary for reading included files"""

    def exists(self, path: str) -> bool:
        ...

    def read_all(self, path: str) -> str:
        ...


class LocalFileAccess:
    """
    FileAccess backed by the local filesystem

    Relative paths resolve against root, so that a scenario compiled from
    inputdir/ includes its siblings regardless of the working directory.
    """

    def __init__(self, root: Union[str, Path] = ".", encoding: str = "utf-8") -> None:
        self.root = Path(root)
        self.encoding = encoding

    def path_resolve(self, path: str) -> Path:
        """Resolve an include argument against root (absolute paths kept)"""
        candidate = Path(path)
        if candidate.is_absolute():
            return candidate
        return self.root / candidate

    def exists(self, path: str) -> bool:
        return self.path_resolve(path).is_file()

    def read_all(self, path: str) -> str:
        """
        Read an included file as text

        Raises:
            OSError: If the file cannot be read
        """
        resolved = self.path_resolve(path)
        LOG(f"Reading include {resolved}", level=3)
        return resolved.read_text(encoding=self.encoding)

    def __repr__(self) -> str:
        return f"LocalFileAccess(root='{self.root}')"
