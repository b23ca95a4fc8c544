"""
Platform detection and utilities for cmdguard.

This module provides functions to detect the operating system and terminal
capabilities, and to pick the shell used for executing commands.
"""

import os
import platform
import sys
from typing import Dict


def get_platform_info() -> Dict[str, str]:
    """
    Get basic information about the current platform.

    Returns:
        Dict[str, str]: Dictionary containing platform information.
    """
    return {
        "os_name": platform.system(),
        "architecture": platform.machine(),
        "python_version": platform.python_version(),
        "shell": get_default_shell(),
    }


def is_windows() -> bool:
    """
    Check if the current platform is Windows.

    Returns:
        bool: True if Windows, False otherwise.
    """
    return platform.system().lower() == "windows"


def is_macos() -> bool:
    """
    Check if the current platform is macOS.

    Returns:
        bool: True if macOS, False otherwise.
    """
    return platform.system().lower() == "darwin"


def get_default_shell() -> str:
    """
    Get the system shell that runs commands.

    Returns:
        str: ComSpec (or cmd.exe) on Windows, /bin/sh elsewhere.
    """
    if is_windows():
        return os.environ.get("COMSPEC", "cmd.exe")
    return "/bin/sh"


def supports_ansi_colors() -> bool:  # pragma: no cover - terminal capability check
    """
    Check if the terminal supports ANSI colors.

    Returns:
        bool: True if ANSI colors are supported, False otherwise.
    """
    if os.environ.get("NO_COLOR"):
        return False

    if is_windows():
        # Windows Terminal and Windows 10+ consoles understand ANSI
        if os.environ.get("WT_SESSION") or os.environ.get("ANSICON"):
            return True
        try:
            if hasattr(sys, "getwindowsversion"):
                if sys.getwindowsversion().major >= 10:
                    return True
        except AttributeError:
            pass

    term_env = os.environ.get("TERM")
    if term_env and term_env != "dumb":
        return True

    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()
