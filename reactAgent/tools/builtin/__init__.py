"""Builtin tool catalog."""

from .file_ops import get_file_info, list_files, read_file, write_file
from .run_command import run_command
from .search_files import search_files
from .search_replace import search_replace

BUILTIN_TOOLS = [
    read_file,
    write_file,
    list_files,
    get_file_info,
    search_files,
    run_command,
    search_replace,
]

__all__ = [
    "BUILTIN_TOOLS",
    "read_file",
    "write_file",
    "list_files",
    "get_file_info",
    "search_files",
    "run_command",
    "search_replace",
]
