"""Terminal-safe output handling with Unicode fallback and debug tracing.

Detects terminal encoding and provides ASCII alternatives for the icons used
in reports, so output never crashes on terminals without UTF-8 support.
"""
import sys
import locale
from typing import Callable


# Unicode to ASCII icon mapping for non-UTF-8 terminals
ICON_MAP = {
    # Status icons
    '✓': '[OK]',
    '✅': '[OK]',
    '✗': '[FAIL]',
    '❌': '[FAIL]',
    '⚠️': '[WARN]',
    '⚠': '[WARN]',

    # Report markers
    '🚀': '>>',
    '👉': '->',
    '📦': '[module]',
    '🔍': '[search]',

    # Structural
    '→': '->',
    '…': '...',
    '•': '*',
}


def detect_terminal_encoding() -> str:
    """Detect the terminal's encoding capability.

    Returns:
        str: Terminal encoding ('utf-8', 'cp1252', 'ascii', etc.)
    """
    if hasattr(sys.stdout, 'encoding') and sys.stdout.encoding:
        return sys.stdout.encoding.lower()

    try:
        return locale.getpreferredencoding().lower()
    except Exception:
        pass

    return 'ascii'


def is_utf8_capable() -> bool:
    """Check if the terminal can handle UTF-8 Unicode characters."""
    return detect_terminal_encoding() in ('utf-8', 'utf8', 'utf_8')


def sanitize_for_terminal(text: str) -> str:
    """Replace Unicode icons with ASCII equivalents if terminal doesn't support UTF-8.

    Args:
        text: Text potentially containing Unicode icons

    Returns:
        str: Sanitized text safe for current terminal
    """
    if is_utf8_capable():
        return text

    sanitized = text
    for unicode_char, ascii_replacement in ICON_MAP.items():
        sanitized = sanitized.replace(unicode_char, ascii_replacement)

    return sanitized


def create_safe_print() -> Callable:
    """Create a print function that automatically sanitizes output."""
    def safe_print(*args, **kwargs):
        sanitized_args = [
            sanitize_for_terminal(arg) if isinstance(arg, str) else arg
            for arg in args
        ]
        print(*sanitized_args, **kwargs)

    return safe_print


safe_print = create_safe_print()


# Debug tracing (off unless --verbose or TFUSAGE_VERBOSE)
_verbose = False


def set_verbose(enabled: bool):
    """Turn debug tracing on or off for the whole process."""
    global _verbose
    _verbose = bool(enabled)


def is_verbose() -> bool:
    return _verbose


def debug(message: str):
    """Print a debug trace to stderr when verbose mode is enabled.

    Args:
        message: Trace text (e.g. 'Visited: modules/network')
    """
    if _verbose:
        safe_print(f"[debug] {message}", file=sys.stderr)
