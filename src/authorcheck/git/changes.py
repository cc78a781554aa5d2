"""Parsing of ``--name-status -z`` diff output into change records."""

import re

from .base import ChangeKind, ChangeRecord

# R087 or C100, followed by the source and destination fields
_FOLLOW_STATUS = re.compile(r"^(?P<kind>[RC])(?P<index>\d{1,3})$")
# M, A, D, T..., also two-letter statuses of combined diffs
_SIMPLE_STATUS = re.compile(r"^[A-Z]{1,2}$")


class ChangeSetParser:
    """Parses NUL-separated ``--name-status -z`` output of a single commit.

    Paths are taken verbatim, so names with spaces, tabs or non-ASCII
    characters are never quoted or escaped.
    """

    def parse(self, output: str) -> list[ChangeRecord]:
        changes: list[ChangeRecord] = []
        fields = iter(output.split("\0"))

        for field in fields:
            status = field.strip()
            if not status:
                continue

            match = _FOLLOW_STATUS.match(status)
            if match:
                source = next(fields, None)
                path = next(fields, None)
                if not source or not path:
                    break
                changes.append(
                    ChangeRecord(
                        kind=ChangeKind(match["kind"]),
                        path=path,
                        source=source,
                        similarity=min(int(match["index"]), 100),
                    )
                )
                continue

            if _SIMPLE_STATUS.match(status):
                path = next(fields, None)
                if not path:
                    break
                changes.append(ChangeRecord(kind=_simple_kind(status), path=path))

        return changes


def _simple_kind(status: str) -> ChangeKind:
    if status == "A":
        return ChangeKind.ADD
    if status == "D":
        return ChangeKind.DELETE
    return ChangeKind.MODIFY
