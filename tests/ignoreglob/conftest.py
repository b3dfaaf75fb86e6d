from typing import Iterator, List

import pytest

from ignoreglob.config import GlobSettings, set_settings
from ignoreglob.tree import MemoryNode


class CountingNode(MemoryNode):
    """Records every directory whose children are listed."""

    listed: List[str] = []

    def children(self) -> List["CountingNode"]:  # type: ignore[override]
        type(self).listed.append(self.name)
        return list(super().children())  # type: ignore[arg-type]


@pytest.fixture(autouse=True)
def default_settings() -> Iterator[None]:
    set_settings(GlobSettings())
    yield
    set_settings(GlobSettings())


@pytest.fixture
def project_tree() -> CountingNode:
    """
    root/
        .git/config, .git/objects/ab
        build/a/b.txt
        src/Foo.class
        src/sub/Foo.class
        src/build/out.txt
        README.md
    """
    CountingNode.listed = []

    root = CountingNode("root")

    git = root.add_dir(".git")
    git.add_file("config")
    git.add_dir("objects").add_file("ab")

    root.add_dir("build").add_dir("a").add_file("b.txt")

    src = root.add_dir("src")
    src.add_file("Foo.class")
    src.add_dir("sub").add_file("Foo.class")
    src.add_dir("build").add_file("out.txt")

    root.add_file("README.md")

    return root
