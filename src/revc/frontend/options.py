"""
revc Parser Options
===================

Configuration for a single parse. Defaults suit interactive use; the
environment can override the reporting policy without code changes:

    REVC_MAX_ERRORS            Error diagnostics kept per parse (integer)
    REVC_DEDUPLICATE           "0"/"false"/"no" keeps same-position errors
    REVC_SUPPRESS_EOF_ERRORS   "0"/"false"/"no" keeps trailing EOF errors
"""

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

DEFAULT_MAX_ERRORS = 100

_FALSE_VALUES = ("0", "false", "no", "off")


def _env_flag(value: str) -> bool:
    return value.strip().lower() not in _FALSE_VALUES


@dataclass
class ParserOptions:
    """
    Parser configuration options.

    Attributes:
        filename: Name shown in diagnostics ("<input>" for strings)
        max_errors: Error diagnostics kept before the rest are dropped
        deduplicate: Drop an error at the same position as the previous one
        suppress_eof_errors: Drop errors on the end-of-input token once
                             another error has been reported
        report_priming_errors: Report lexical warnings met while fetching
                               the very first token. Off by default, since
                               leading garbage would otherwise be reported
                               before the parse has started.
    """
    filename: str = "<input>"
    max_errors: int = DEFAULT_MAX_ERRORS
    deduplicate: bool = True
    suppress_eof_errors: bool = True
    report_priming_errors: bool = False

    def __post_init__(self):
        if self.max_errors < 1:
            raise ValueError(f"max_errors must be at least 1, got {self.max_errors}")

    @classmethod
    def from_env(cls, **overrides) -> "ParserOptions":
        """
        Create ParserOptions from environment variables.

        Args:
            **overrides: Field values that take precedence over the
                         environment (for example filename)

        Returns:
            ParserOptions with values from environment variables
        """
        values = {}

        if max_errors := os.environ.get("REVC_MAX_ERRORS"):
            try:
                values["max_errors"] = max(1, int(max_errors))
            except ValueError:
                logger.warning(f"Ignoring invalid REVC_MAX_ERRORS={max_errors!r}")

        if deduplicate := os.environ.get("REVC_DEDUPLICATE"):
            values["deduplicate"] = _env_flag(deduplicate)

        if suppress_eof := os.environ.get("REVC_SUPPRESS_EOF_ERRORS"):
            values["suppress_eof_errors"] = _env_flag(suppress_eof)

        values.update(overrides)
        return cls(**values)
