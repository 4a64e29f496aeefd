from __future__ import annotations


class PsetviewError(Exception):
    pass


class ScopeClosedError(PsetviewError):
    pass


class EntityNotFoundError(PsetviewError):
    def __init__(self, entity_id: str) -> None:
        super().__init__(f"no entity with handle {entity_id!r}")
        self.entity_id = entity_id
