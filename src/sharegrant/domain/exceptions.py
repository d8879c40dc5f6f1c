"""Domain exceptions."""


class ShareGrantError(Exception):
    """Base exception for ShareGrant."""

    pass


class PermissionDenied(ShareGrantError):
    """Actor is not allowed to perform the requested action."""

    pass


class NotFound(ShareGrantError):
    """Requested resource was not found."""

    pass


class ValidationError(ShareGrantError):
    """Validation failed for input data."""

    pass


class MalformedACL(ValidationError):
    """Stored ACL could not be decoded into entries."""

    pass


class InvalidACLFormat(ValidationError):
    """Incoming ACL is not an array or has a badly formed entry."""

    pass


class WriteDeniedToViewer(ValidationError):
    """ACL grants readwrite to one or more viewer users."""

    field = "access_control_list"

    def __init__(self, usernames: list[str]) -> None:
        self.usernames = usernames
        super().__init__(f"grants write to viewers: {','.join(usernames)}")


class PermissionGrantError(ShareGrantError):
    """Backing-store grant attempted on a table without ownership."""

    pass


class BackingStoreError(ShareGrantError):
    """Backing store rejected a grant or revoke."""

    pass


class NotificationDeliveryFailure(ShareGrantError):
    """Notification could not be enqueued. Logged, never raised to callers."""

    pass
