"""
Error Taxonomy
==============

Every failure a command can surface to the user:
- EventStoreError        - events file unreadable, corrupt or unwritable
- DateParseError         - malformed --from / --to value
- UnknownStatusError     - --status value outside the status enumeration

None of these are retried. The fix is always: correct the input and re-run.
"""

from pathlib import Path
from typing import Iterable, Optional


class VpnClientError(Exception):
    """Base class for all vpn-client errors"""


class EventStoreError(VpnClientError, OSError):
    """The events file could not be read, decoded or written"""

    def __init__(self, message: str, path: Optional[str | Path] = None):
        super().__init__(message)
        self.path = Path(path) if path is not None else None

    def __str__(self) -> str:
        return self.args[0]


class DateParseError(VpnClientError, ValueError):
    """A date bound could not be parsed as YYYY-MM-DD"""

    def __init__(self, token: str, reason: str):
        self.token = token
        self.reason = reason
        super().__init__(f"Text '{token}' could not be parsed: {reason}")


class UnknownStatusError(VpnClientError, ValueError):
    """A status filter did not name a known status"""

    def __init__(self, token: str, valid: Iterable[str] = ()):
        self.token = token
        self.valid = list(valid)
        message = f"Unknown status: {token}"
        if self.valid:
            message += f" (valid values: {', '.join(self.valid)})"
        super().__init__(message)

