from .__version__ import __version__
from .config import GlobSettings, get_settings, load_settings_from_path, set_settings
from .glob import MATCH_ALL, NEVER_MATCHES, CompiledPattern, Matcher, build_matcher, compile_regex_text, translate
from .ignore_file import IgnoreRule, find_ignored, parse_ignore_rules, read_ignore_file
from .search import iter_search, search, search_paths
from .tree import FileSystemNode, MemoryNode, TreeNode, relative_path
from .utils.threading import CancellationToken

__all__ = [
    "MATCH_ALL",
    "NEVER_MATCHES",
    "CancellationToken",
    "CompiledPattern",
    "FileSystemNode",
    "GlobSettings",
    "IgnoreRule",
    "Matcher",
    "MemoryNode",
    "TreeNode",
    "__version__",
    "build_matcher",
    "compile_regex_text",
    "find_ignored",
    "get_settings",
    "iter_search",
    "load_settings_from_path",
    "parse_ignore_rules",
    "read_ignore_file",
    "relative_path",
    "search",
    "search_paths",
    "set_settings",
    "translate",
]
