"""
Utility modules for DataCurator.

Provides shared functionality:
- progress: Console output, spinners and verbosity control
"""

from datacurator.utils.progress import (
    VerbosityLevel,
    get_console,
    get_verbosity,
    set_verbosity,
    is_quiet,
    is_verbose,
    print_info,
    print_success,
    print_warning,
    print_error,
    print_debug,
    spinner,
)

__all__ = [
    "VerbosityLevel",
    "get_console",
    "get_verbosity",
    "set_verbosity",
    "is_quiet",
    "is_verbose",
    "print_info",
    "print_success",
    "print_warning",
    "print_error",
    "print_debug",
    "spinner",
]
