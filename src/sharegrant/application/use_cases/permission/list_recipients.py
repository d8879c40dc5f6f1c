"""List recipients use case."""

from uuid import UUID

from sharegrant.domain.entities import Group, Organization, User
from sharegrant.domain.exceptions import NotFound
from sharegrant.domain.value_objects import PrincipalType


class ListRecipientsUseCase:
    """Principals named in a permission's ACL that still exist, in ACL order."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(self, permission_id: UUID) -> list[User | Organization | Group]:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
            if not permission:
                raise NotFound("Permission", permission_id)

            lookups = {
                PrincipalType.USER: uow.principals.get_user,
                PrincipalType.ORGANIZATION: uow.principals.get_organization,
                PrincipalType.GROUP: uow.principals.get_group,
            }
            recipients = []
            seen = set()
            for entry in permission.access_control_list:
                key = (entry.principal_type, entry.principal_id)
                if key in seen:
                    continue
                seen.add(key)
                principal = await lookups[entry.principal_type](entry.principal_id)
                if principal is not None:
                    recipients.append(principal)
            return recipients
