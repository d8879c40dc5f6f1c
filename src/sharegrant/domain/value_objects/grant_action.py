"""Grant/revoke transitions produced by ACL diffs."""

from enum import StrEnum


class GrantAction(StrEnum):
    """Direction of an access transition."""

    GRANT = "grant"
    REVOKE = "revoke"
