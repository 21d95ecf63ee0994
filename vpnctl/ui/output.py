"""
Console output for vpnctl.
Usage and results go to stdout, diagnostics to stderr.
"""

import sys
from typing import Optional, TextIO


TEXT_COLOR_MAPPING = {
    "red": "31;1",
}


def get_colored_text(text: str, color: str) -> str:
    """
    Get colored text.

    Raises:
        ValueError: If the specified color is not supported
    """
    if color not in TEXT_COLOR_MAPPING:
        raise ValueError(
            f"Unsupported color: {color}. Available colors: {', '.join(TEXT_COLOR_MAPPING.keys())}"
        )

    color_str = TEXT_COLOR_MAPPING[color]
    return f"\u001b[{color_str}m{text}\u001b[0m"


class UIManager:
    """Writes user-facing lines for vpnctl."""

    def __init__(self, stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None):
        # Resolved lazily so test runners that swap sys.stdout still capture us
        self._stdout = stdout
        self._stderr = stderr

    @property
    def stdout(self) -> TextIO:
        return self._stdout if self._stdout is not None else sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr if self._stderr is not None else sys.stderr

    def out(self, message: str) -> None:
        """Print a plain line to stdout."""
        self._print(message, self.stdout)

    def error(self, message: str) -> None:
        """Print error message in red on stderr."""
        self._print(message, self.stderr, "red")

    def _print(self, text: str, file: TextIO, color: Optional[str] = None) -> None:
        if color and _is_tty(file):
            text = get_colored_text(text, color)
        print(text, file=file)
        file.flush()


def _is_tty(file: TextIO) -> bool:
    isatty = getattr(file, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # Closed stream
        return False
