"""Error hierarchy for prebuild.

Every module raises its own subclass of PrebuildError. Library code never
catches these; the CLI turns them into a diagnostic and a process exit code.
"""

from typing import Optional


class PrebuildError(Exception):
    """Base class for fatal orchestration errors.

    Attributes:
        message: What went wrong
        remediation: How the user can fix it (optional)
        exit_code: Process exit code the CLI should use
    """

    exit_code = 1

    def __init__(self, message: str, remediation: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.remediation = remediation

    def __str__(self) -> str:
        if self.remediation:
            return f"{self.message}\n{self.remediation}"
        return self.message
