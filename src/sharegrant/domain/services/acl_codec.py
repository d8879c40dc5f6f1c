"""ACL codec - decode stored ACLs, validate incoming ones, serialize.

Stored form is a JSON array of ``{"type", "id", "access"}`` objects.
Incoming form (from API callers) nests the principal under ``entity``::

    [
        {
            "type": "user",
            "entity": {"id": "<uuid>", "username": "alice", "avatar_url": "..."},
            "access": "r",
        }
    ]
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any
from uuid import UUID

from sharegrant.domain.entities import ACLEntry
from sharegrant.domain.exceptions import InvalidACLFormat, MalformedACL
from sharegrant.domain.value_objects import AccessLevel, PrincipalType

DEFAULT_ACL: tuple[ACLEntry, ...] = ()

ALLOWED_ENTITY_KEYS = frozenset({"id", "username", "name", "avatar_url"})

_PRINCIPAL_TYPES = frozenset(t.value for t in PrincipalType)


def parse(raw: Any) -> list[ACLEntry]:
    """Decode a stored ACL (JSON text, bytes or decoded list)."""
    if raw is None:
        return list(DEFAULT_ACL)
    if isinstance(raw, (str, bytes, bytearray)):
        try:
            raw = json.loads(raw)
        except ValueError as e:
            raise MalformedACL(f"ACL is not valid JSON: {e}") from e
    if not isinstance(raw, list):
        raise MalformedACL("ACL is not an array")

    entries = []
    for item in raw:
        if not isinstance(item, Mapping):
            raise MalformedACL(f"ACL entry is not an object: {item!r}")
        try:
            entries.append(
                ACLEntry(
                    principal_type=PrincipalType(item["type"]),
                    principal_id=UUID(str(item["id"])),
                    access=AccessLevel(item["access"]),
                )
            )
        except (KeyError, ValueError) as e:
            raise MalformedACL(f"Bad ACL entry {item!r}: {e}") from e
    return entries


def serialize(acl: Sequence[ACLEntry]) -> list[dict[str, str]]:
    """Structural dump of ACL entries."""
    return [entry.to_dict() for entry in acl]


def dumps(acl: Sequence[ACLEntry]) -> str:
    """Serialize ACL to stored JSON text."""
    return json.dumps(serialize(acl))


def valid_accesses(table_backed: bool) -> frozenset[str]:
    """Access codes allowed for an entity. Only tables accept readwrite."""
    if table_backed:
        return frozenset(level.value for level in AccessLevel)
    return frozenset({AccessLevel.READONLY.value, AccessLevel.NONE.value})


def _has_valid_entity(item: Mapping) -> bool:
    entity = item.get("entity")
    if not entity or not isinstance(entity, Mapping):
        return False
    return set(entity.keys()) <= ALLOWED_ENTITY_KEYS


def _is_valid_item(item: Any, accesses: frozenset[str]) -> bool:
    if not isinstance(item, Mapping):
        return False
    if not (isinstance(item.get("type"), str) and isinstance(item.get("access"), str)):
        return False
    if not (item["type"] and item["access"]):
        return False
    if item["type"] not in _PRINCIPAL_TYPES:
        return False
    return _has_valid_entity(item) and item["access"] in accesses


def validate(candidate: Any, table_backed: bool) -> list[ACLEntry]:
    """Validate an incoming ACL and normalize it to entries.

    Raises InvalidACLFormat on the first bad item; nothing is returned
    partially. Items without an entity id are dropped afterwards, they
    come from legacy clients and carry no principal.
    """
    incoming = list(DEFAULT_ACL) if candidate is None else candidate
    if not isinstance(incoming, list):
        raise InvalidACLFormat("ACL is not an array")

    accesses = valid_accesses(table_backed)
    for item in incoming:
        if not _is_valid_item(item, accesses):
            raise InvalidACLFormat("Wrong ACL entry format")

    entries = []
    for item in incoming:
        principal_id = item["entity"].get("id")
        if not principal_id:
            continue
        try:
            principal_id = UUID(str(principal_id))
        except ValueError as e:
            raise InvalidACLFormat("Wrong ACL entry format") from e
        entries.append(
            ACLEntry(
                principal_type=PrincipalType(item["type"]),
                principal_id=principal_id,
                access=AccessLevel(item["access"]),
            )
        )
    return entries
