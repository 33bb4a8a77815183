"""
System interaction: process lookup and privilege checks.
"""

from .privileges import (
    current_username,
    effective_uid,
    ensure_root_privileges,
    has_root_privileges,
)
from .processes import (
    DEFAULT_PROC_ROOT,
    ProcessPaths,
    ensure_process_exists,
    extract_process_name,
    find_pid_by_name,
    list_pids,
    not_found_if_exited,
    process_paths,
    read_process_name,
)

__all__ = [
    # Privileges
    "current_username",
    "effective_uid",
    "ensure_root_privileges",
    "has_root_privileges",
    # Processes
    "DEFAULT_PROC_ROOT",
    "ProcessPaths",
    "ensure_process_exists",
    "extract_process_name",
    "find_pid_by_name",
    "list_pids",
    "not_found_if_exited",
    "process_paths",
    "read_process_name",
]
