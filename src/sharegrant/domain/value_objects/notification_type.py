"""Outbound notification event types."""

from enum import StrEnum


class NotificationType(StrEnum):
    """Share/unshare mails for derived maps and canonical tables."""

    SHARE_VISUALIZATION = "share_visualization"
    UNSHARE_VISUALIZATION = "unshare_visualization"
    SHARE_TABLE = "share_table"
    UNSHARE_TABLE = "unshare_table"
