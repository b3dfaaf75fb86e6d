import os
from pathlib import Path
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union, cast

from .search import iter_search
from .tree import TreeNode, relative_path
from .utils.logging import LoggingDescriptor
from .utils.threading import CancellationToken

GIT_IGNORE_FILE = ".gitignore"

_logger = LoggingDescriptor(name=__name__)


class IgnoreRule(NamedTuple):
    pattern: str
    negation: bool = False
    source: Optional[Tuple[str, int]] = None

    def __str__(self) -> str:
        return ("!" if self.negation else "") + self.pattern

    def __repr__(self) -> str:
        return f"IgnoreRule({str(self)!r})"


def _strip_trailing_spaces(line: str) -> str:
    stripped = line.rstrip(" ")
    if len(stripped) < len(line) and stripped.endswith("\\") and not stripped.endswith("\\\\"):
        return stripped + " "
    return stripped


def rule_from_line(line: str, source: Optional[Tuple[str, int]] = None) -> Optional[IgnoreRule]:
    """Parses a single line of an ignore file, returns `None` for blank lines and comments."""
    line = line.rstrip("\r\n")

    if line.strip() == "" or line.startswith("#"):
        return None

    negation = line.startswith("!")
    if negation:
        line = line[1:]
    elif line.startswith("\\#") or line.startswith("\\!"):
        line = line[1:]

    line = _strip_trailing_spaces(line)
    if not line:
        return None

    return IgnoreRule(line, negation, source)


def parse_ignore_rules(text: str, source: Optional[str] = None) -> List[IgnoreRule]:
    result = []
    for line_no, line in enumerate(text.splitlines()):
        rule = rule_from_line(line, (source, line_no + 1) if source is not None else None)
        if rule is not None:
            result.append(rule)
    return result


def read_ignore_file(path: Union[str, "os.PathLike[str]"]) -> List[IgnoreRule]:
    ignore_file = Path(path)
    if ignore_file.is_dir():
        ignore_file = ignore_file / GIT_IGNORE_FILE

    if not ignore_file.is_file():
        return []

    _logger.debug(lambda: f"using ignore file: '{ignore_file}'")

    return parse_ignore_rules(ignore_file.read_text("utf-8"), str(ignore_file))


def find_ignored(
    root: TreeNode,
    rules: Iterable[IgnoreRule],
    include_nested: bool = True,
    *,
    token: Optional[CancellationToken] = None,
) -> List[TreeNode]:
    """Returns the nodes below `root` ignored by `rules`.

    Rules are applied in order, a negated rule removes the nodes it matches from the nodes collected
    so far. The result keeps the order in which nodes were first found.
    """
    found: Dict[str, TreeNode] = {}

    for rule in rules:
        for node in iter_search(root, rule.pattern, include_nested, token=token):
            path = cast(str, relative_path(root, node))
            if rule.negation:
                found.pop(path, None)
            elif path not in found:
                found[path] = node

    return list(found.values())
