"""Kinds of principal that can appear in an ACL."""

from enum import StrEnum


class PrincipalType(StrEnum):
    """Principal kinds. Values are the stored ACL `type` codes."""

    USER = "user"
    ORGANIZATION = "org"
    GROUP = "group"
