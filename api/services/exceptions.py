"""Service-layer exceptions.

Raised by services, mapped to HTTP responses by the handlers registered in
main.py. Services never raise HTTPException themselves.
"""

from collections.abc import Iterable


class PaginationParameterError(Exception):
    """Raised when listing is asked for a negative offset or a non-positive size."""

    def __init__(self, from_: int, size: int):
        self.from_ = from_
        self.size = size
        super().__init__(
            f"Pagination parameters must satisfy from >= 0 and size > 0 "
            f"(got from={from_}, size={size})"
        )


class BadParameterError(Exception):
    """Raised when a request parameter is outside its allowed range."""

    pass


class ElementNotFoundError(Exception):
    """Raised when one or more requested records do not exist."""

    def __init__(self, entity: str, ids: int | Iterable[int]):
        self.entity = entity
        self.ids = (ids,) if isinstance(ids, int) else tuple(sorted(ids))
        if len(self.ids) == 1:
            message = f"{entity} with id={self.ids[0]} was not found"
        else:
            joined = ", ".join(str(i) for i in self.ids)
            message = f"{entity} with ids [{joined}] were not found"
        super().__init__(message)


class UnresolvedReferenceError(Exception):
    """Raised when a reference that must resolve does not.

    Signals inconsistent data between collaborators (e.g. an event whose
    initiator the user lookup did not return), not a bad request.
    """

    def __init__(self, entity: str, entity_id: int, referenced_by: str):
        self.entity = entity
        self.entity_id = entity_id
        self.referenced_by = referenced_by
        super().__init__(
            f"{entity} id={entity_id} referenced by {referenced_by} could not be resolved"
        )
