# src/oss_output/contracts/enums.py
"""Status codes and settings values shared across subsystem boundaries."""

from enum import StrEnum


class SessionState(StrEnum):
    """State of a partition output session.

    IDLE: no partition open (initial state, and after a successful close).
    OPEN: a staging file exists and accepts writes.
    FAILED: terminal; a write, upload or close failed, or the host aborted.
    """

    IDLE = "idle"
    OPEN = "open"
    FAILED = "failed"


class CannedAcl(StrEnum):
    """Canned access-control policy applied to every uploaded object.

    DEFAULT inherits the bucket's ACL.
    """

    DEFAULT = "default"
    PRIVATE = "private"
    PUBLIC_READ = "public-read"
    PUBLIC_READ_WRITE = "public-read-write"

    @classmethod
    def parse(cls, value: str) -> "CannedAcl":
        """Parse either the wire value or the OSS SDK constant name.

        Accepts "public-read" as well as "PublicRead" / "PUBLIC_READ".

        Raises:
            ValueError: If the value names no known policy.
        """
        normalized = value.strip().replace("-", "").replace("_", "").lower()
        for member in cls:
            if member.value.replace("-", "") == normalized:
                return member
        valid = ", ".join(member.value for member in cls)
        raise ValueError(f"Unknown canned ACL {value!r}. Expected one of: {valid}")
