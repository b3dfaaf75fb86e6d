from typing import Collection, Iterator, List, Optional, Tuple, cast

from .config import get_settings
from .glob import MATCH_ALL, NEVER_MATCHES, Matcher, build_matcher
from .tree import TreeNode, is_vcs_directory, relative_path
from .utils.logging import LoggingDescriptor
from .utils.threading import CancellationToken, check_canceled

__all__ = ["iter_search", "search", "search_paths"]

_logger = LoggingDescriptor(name=__name__)


def iter_search(
    root: TreeNode,
    glob: str,
    include_nested: bool = False,
    *,
    token: Optional[CancellationToken] = None,
    vcs_directories: Optional[Collection[str]] = None,
) -> Iterator[TreeNode]:
    """Walks the tree below `root` in pre-order and yields every node whose relative path matches `glob`.

    Symbolic links are never followed and version control directories are skipped together with
    their content. If `include_nested` is set, all descendants of a matching node are yielded too.

    Raises `concurrent.futures.CancelledError` if `token` is cancelled or expires during the walk.
    """
    matcher = build_matcher(glob)
    if matcher is NEVER_MATCHES:
        return

    if vcs_directories is None:
        vcs_directories = get_settings().vcs_directories

    stack: List[Tuple[TreeNode, Matcher]] = [(root, matcher)]

    while stack:
        check_canceled(token)

        node, current = stack.pop()

        path = relative_path(root, node)
        if path is None or (node is not root and is_vcs_directory(node, vcs_directories)):
            _logger.trace(lambda: f"skip {node!r}")
            continue

        matches = current.matches(path)
        if matches:
            yield node

        if not node.is_dir or node.is_symlink:
            continue

        inherited = MATCH_ALL if include_nested and matches else current
        stack.extend((child, inherited) for child in reversed(node.children()))


def search(
    root: TreeNode,
    glob: str,
    include_nested: bool = False,
    *,
    token: Optional[CancellationToken] = None,
    vcs_directories: Optional[Collection[str]] = None,
) -> List[TreeNode]:
    with _logger.measure_time(lambda: f"search {glob!r} in {root!r}", context_name="search"):
        return list(
            iter_search(root, glob, include_nested, token=token, vcs_directories=vcs_directories),
        )


def search_paths(
    root: TreeNode,
    glob: str,
    include_nested: bool = False,
    *,
    token: Optional[CancellationToken] = None,
    vcs_directories: Optional[Collection[str]] = None,
) -> List[str]:
    return [
        cast(str, relative_path(root, node))
        for node in search(root, glob, include_nested, token=token, vcs_directories=vcs_directories)
    ]
