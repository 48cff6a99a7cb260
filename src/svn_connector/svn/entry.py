#!/usr/bin/env python3
# Directory entries, as reported by svn list and svn info

# Import Python standard modules
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class NodeKind(Enum):
    FILE = "file"
    DIR = "dir"
    OTHER = "other"

    @classmethod
    def from_svn(cls, kind: str) -> "NodeKind":
        """Map svn's kind attribute, ex. file / dir / none / unknown, onto NodeKind"""

        try:
            return cls(str(kind).lower())
        except ValueError:
            return cls.OTHER


class DirEntry:
    """
    One entry of an svn directory listing

    path is relative to the listed directory, ex. order.bpmn, not a full URL
    """

    def __init__(
            self,
            path: str,
            kind: NodeKind,
            last_changed_date: Optional[datetime] = None,
            last_changed_revision: Optional[int] = None,
            size: Optional[int] = None,
        ):
        self.path = path
        self.kind = kind
        self.last_changed_date = last_changed_date
        self.last_changed_revision = last_changed_revision
        self.size = size

    def __repr__(self):
        return f"DirEntry(path={self.path!r}, kind={self.kind.name}, last_changed_date={self.last_changed_date!r})"

    def __eq__(self, other):
        if not isinstance(other, DirEntry):
            return NotImplemented
        return (
            self.path == other.path and
            self.kind == other.kind and
            self.last_changed_date == other.last_changed_date
        )


def parse_svn_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse svn's XML date format, ex. 2024-03-05T14:22:31.123456Z, into a timezone-aware datetime

    Returns None for missing or unparseable values
    """

    if not value:
        return None

    value = value.strip()

    for date_format in ("%Y-%m-%dT%H:%M:%S.%fZ", "%Y-%m-%dT%H:%M:%SZ"):
        try:
            return datetime.strptime(value, date_format).replace(tzinfo=timezone.utc)
        except ValueError:
            continue

    return None
