"""
Exceptions raised by the Faux Packet store.

Absence is never an exception: lookups return ``None`` and deletes return
``False``. These cover bad input and operations on unknown entities.
"""


class InvalidReferenceError(ValueError):
    """A create request references a facility or plan that does not exist."""


class DuplicateEntityError(ValueError):
    """A facility code, plan slug or project BGP config already exists."""


class InvalidListOptionsError(ValueError):
    """Pagination parameters could not be parsed."""


class EntityNotFoundError(KeyError):
    """An update targeted an entity that does not exist."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable
        return str(self.args[0]) if self.args else ""
