"""
Deterministic numbering of result files by their place in the source tree.

Each folder gets the index it had among its parent's children when first
seen; each file gets the next index inside its folder::

    <root>
     |___000.csv        -> 000
     |___suite/         -> 001
         |___a.csv      -> 001.000
         |___b.csv      -> 001.001
"""

from __future__ import annotations

import os
import weakref
from pathlib import Path, PurePosixPath
from typing import Dict, List, Optional, Union

from .utils import join_indices


class Folder:
    """Indexing state for one directory level."""

    def __init__(self, path: PurePosixPath, index: int, parent: Optional["Folder"] = None):
        self.path = path
        self.index = index
        self._parent = weakref.ref(parent) if parent is not None else None
        self._inner_index = 0
        self.folders: Dict[str, Folder] = {}

    @property
    def parent(self) -> Optional["Folder"]:
        return self._parent() if self._parent is not None else None

    def next_inner_index(self) -> int:
        index = self._inner_index
        self._inner_index += 1
        return index

    def find_or_add(self, segment: str) -> "Folder":
        folder = self.folders.get(segment)
        if folder is None:
            folder = Folder(self.path / segment, self.next_inner_index(), parent=self)
            self.folders[segment] = folder
        return folder

    def indices(self) -> List[int]:
        """Indices of this folder's ancestors (root excluded) followed by its own."""
        indices: List[int] = []
        folder: Optional[Folder] = self
        while folder is not None and folder.parent is not None:
            indices.append(folder.index)
            folder = folder.parent
        return indices[::-1]

    def walk(self):
        for folder in self.folders.values():
            yield folder
            yield from folder.walk()


class PrefixConstructor:
    """Assigns and records prefixes for files under a single source root."""

    def __init__(self, root: Union[str, Path]):
        self.root = Path(os.path.abspath(root))
        self.root_folder = Folder(PurePosixPath(), 0)

    def index_for(self, path: Union[str, Path]) -> List[int]:
        """
        Folder indices along the file's relative directory, then the file's own index.

        Known folders are reused; only new folders and the file itself advance counters.
        Symlinked files are numbered where the link sits, not where it points.
        """
        relative = Path(os.path.abspath(path)).parent.relative_to(self.root)
        folder = self.root_folder
        indices: List[int] = []
        for segment in relative.parts:
            folder = folder.find_or_add(segment)
            indices.append(folder.index)
        indices.append(folder.next_inner_index())
        return indices

    def get_prefix(self, path: Union[str, Path]) -> str:
        return join_indices(self.index_for(path))

    def manifest(self) -> Dict[str, List[int]]:
        """Map every visited folder's relative path to its indices."""
        return {folder.path.as_posix(): folder.indices() for folder in self.root_folder.walk()}

    def render_manifest(self) -> str:
        lines = [
            f"{join_indices(indices)}\t{path}\n"
            for path, indices in sorted(self.manifest().items())
        ]
        return "".join(lines)
