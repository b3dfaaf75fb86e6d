import os
from pathlib import Path
from typing import Any, Collection, List, Optional, Sequence, Union

from typing_extensions import Protocol, runtime_checkable

from .utils.logging import LoggingDescriptor

DEFAULT_VCS_DIRECTORIES = (".git", ".hg", ".svn", ".bzr", "CVS")


@runtime_checkable
class TreeNode(Protocol):
    """An entry of a hierarchical tree, usually a file or a directory.

    The tree is owned by the host, it is only read while searching.
    """

    @property
    def name(self) -> str: ...

    @property
    def parent(self) -> Optional["TreeNode"]: ...

    @property
    def is_dir(self) -> bool: ...

    @property
    def is_symlink(self) -> bool: ...

    def children(self) -> Sequence["TreeNode"]: ...


def relative_path(root: TreeNode, node: TreeNode) -> Optional[str]:
    """Returns the `/` separated path from `root` to `node`.

    The path of `root` itself is the empty string. Returns `None` if `node` is not `root` or one of
    its descendants.
    """
    parts: List[str] = []

    current: Optional[TreeNode] = node
    while current is not None:
        if current is root or current == root:
            return "/".join(reversed(parts))

        parts.append(current.name)
        current = current.parent

    return None


def is_vcs_directory(node: TreeNode, names: Collection[str] = DEFAULT_VCS_DIRECTORIES) -> bool:
    return node.name in names


class MemoryNode:
    """A tree node held in memory, children keep their insertion order."""

    def __init__(
        self, name: str, parent: Optional["MemoryNode"] = None, *, is_dir: bool = True, is_symlink: bool = False
    ) -> None:
        self._name = name
        self._parent = parent
        self._is_dir = is_dir
        self._is_symlink = is_symlink
        self._children: List[MemoryNode] = []

    @property
    def name(self) -> str:
        return self._name

    @property
    def parent(self) -> Optional["MemoryNode"]:
        return self._parent

    @property
    def is_dir(self) -> bool:
        return self._is_dir

    @property
    def is_symlink(self) -> bool:
        return self._is_symlink

    def children(self) -> Sequence["MemoryNode"]:
        return self._children

    def add(self, name: str, *, is_dir: bool, is_symlink: bool = False) -> "MemoryNode":
        if not self._is_dir:
            raise ValueError(f"Can't add {name!r} to file {self._name!r}")

        child = type(self)(name, self, is_dir=is_dir, is_symlink=is_symlink)
        self._children.append(child)
        return child

    def add_dir(self, name: str) -> "MemoryNode":
        return self.add(name, is_dir=True)

    def add_file(self, name: str) -> "MemoryNode":
        return self.add(name, is_dir=False)

    def add_path(self, path: str) -> "MemoryNode":
        """Adds all segments of a `/` separated path, a trailing `/` creates a directory."""
        segments = [s for s in path.split("/") if s]
        node = self
        for i, segment in enumerate(segments):
            is_last = i == len(segments) - 1
            is_dir = not is_last or path.endswith("/")
            existing = next((c for c in node._children if c.name == segment), None)
            if existing is not None and existing.is_dir == is_dir:
                node = existing
            else:
                node = node.add(segment, is_dir=is_dir)
        return node

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({self._name!r}, is_dir={self._is_dir})"


class FileSystemNode:
    """A tree node backed by the file system.

    Symbolic links are reported with `is_symlink` and never resolved, children are sorted by name.
    """

    _logger = LoggingDescriptor()

    def __init__(
        self,
        path: Union[str, "os.PathLike[str]"],
        parent: Optional["FileSystemNode"] = None,
        *,
        is_dir: Optional[bool] = None,
        is_symlink: Optional[bool] = None,
    ) -> None:
        self.path = Path(os.path.abspath(path))
        self._parent = parent
        self._is_dir = is_dir if is_dir is not None else self.path.is_dir() and not self.path.is_symlink()
        self._is_symlink = is_symlink if is_symlink is not None else self.path.is_symlink()

    @classmethod
    def from_path(cls, path: Union[str, "os.PathLike[str]"]) -> "FileSystemNode":
        return cls(path)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def parent(self) -> Optional["FileSystemNode"]:
        if self._parent is None and self.path.parent != self.path:
            self._parent = FileSystemNode(self.path.parent)
        return self._parent

    @property
    def is_dir(self) -> bool:
        return self._is_dir

    @property
    def is_symlink(self) -> bool:
        return self._is_symlink

    def children(self) -> Sequence["FileSystemNode"]:
        if not self._is_dir:
            return []

        try:
            with os.scandir(self.path) as it:
                entries = sorted(it, key=lambda e: e.name)
                return [
                    FileSystemNode(
                        entry.path,
                        self,
                        is_dir=entry.is_dir(follow_symlinks=False),
                        is_symlink=entry.is_symlink(),
                    )
                    for entry in entries
                ]
        except OSError as e:
            self._logger.debug(lambda: f"Can't list directory {self.path}: {e}")
            return []

    def __eq__(self, other: Any) -> bool:
        if isinstance(other, FileSystemNode):
            return self.path == other.path
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self.path)

    def __fspath__(self) -> str:
        return str(self.path)

    def __repr__(self) -> str:
        return f"{type(self).__qualname__}({str(self.path)!r})"
