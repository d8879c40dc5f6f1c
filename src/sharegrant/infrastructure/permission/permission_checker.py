"""Permission checker implementation - resolves against the stored ACL."""

from uuid import UUID

from sharegrant.domain.services import access_resolver
from sharegrant.domain.value_objects import AccessLevel


class ShareGrantPermissionChecker:
    """Checks user access against a Permission's owner and ACL."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def access_level(self, user_id: UUID, permission_id: UUID) -> AccessLevel:
        """Effective access of user through permission. NONE if either is missing."""
        async with self._uow_factory() as uow:
            perm = await uow.permissions.get_by_id(permission_id)
            if not perm:
                return AccessLevel.NONE
            if perm.is_owner(user_id):
                return AccessLevel.READWRITE

            user = await uow.principals.get_user(user_id)
            if not user:
                return AccessLevel.NONE
            return access_resolver.permission_for(user, perm.access_control_list, perm.owner_id)

    async def check(self, user_id: UUID, permission_id: UUID, required: AccessLevel) -> bool:
        """Check if user has at least the required access."""
        level = await self.access_level(user_id, permission_id)
        return level.allows(required)

    async def can_read(self, user_id: UUID, permission_id: UUID) -> bool:
        return await self.check(user_id, permission_id, AccessLevel.READONLY)

    async def can_write(self, user_id: UUID, permission_id: UUID) -> bool:
        return await self.check(user_id, permission_id, AccessLevel.READWRITE)
