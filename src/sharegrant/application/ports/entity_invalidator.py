"""Entity invalidator port - caches depending on a visualization's sharing."""

from typing import Protocol

from sharegrant.domain.entities import Visualization


class EntityInvalidator(Protocol):
    """Port for invalidating caches after a permission change."""

    async def invalidate(self, visualization: Visualization) -> None: ...
