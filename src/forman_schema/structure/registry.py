"""
Domain root registry for cross-domain field routing.

Fields nested under a select option may declare that they belong to another
domain (a separate, independently-valued document). The receiving collection
of that domain, marked with `x-domain-root`, may be visited before or after
the fields routed to it, so the registry buffers early arrivals and replays
them once the root shows up.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from forman_schema.core.types import DomainFieldsAdder, FormanSpecEntry
from forman_schema.exceptions import DomainRootError

logger = logging.getLogger(__name__)


@dataclass
class PendingField:
    """A field routed to a domain whose root has not been visited yet."""

    field: FormanSpecEntry
    tail: tuple[str, ...] | None = None


@dataclass
class DomainRoot:
    """Registry entry: buffered until resolved, then a live adder."""

    buffer: list[PendingField] = field(default_factory=list)
    adder: DomainFieldsAdder | None = None
    node: Any = None

    @property
    def is_resolved(self) -> bool:
        return self.adder is not None


class DomainRootRegistry:
    """Registry for domain roots (waiting list pattern).

    Created once per top-level conversion and shared by reference across the
    whole traversal. A domain moves from buffered to resolved exactly once,
    when its root collection registers an adder; buffered fields are replayed
    through that adder in arrival order.
    """

    def __init__(self):
        self.roots: dict[str, DomainRoot] = {}

    def register(self, domain: str, adder: DomainFieldsAdder, node: Any = None) -> None:
        """
        Resolve a domain with the adder of its root collection.

        The same root node may be converted more than once (a field-wide
        nested store is expanded for every option); the latest adder then
        replaces the previous one.

        Params:
            domain: Name of the domain the collection is root of
            adder: Callback incorporating fields into the root collection
            node: Field declaring the root, compared by identity

        Raises:
            DomainRootError: When another node already is the root of the domain
        """
        root = self.roots.setdefault(domain, DomainRoot())
        if root.is_resolved:
            if node is None or root.node is not node:
                raise DomainRootError(domain)
            logger.debug("Replacing adder of domain '%s' for a revisited root", domain)

        root.adder = adder
        root.node = node
        pending, root.buffer = root.buffer, []
        if pending:
            logger.debug(
                "Replaying %d buffered field(s) into domain '%s'", len(pending), domain
            )
        for item in pending:
            adder([item.field], item.tail)

    def route(
        self,
        domain: str,
        fields: list[FormanSpecEntry],
        tail: tuple[str, ...] | None = None,
    ) -> None:
        """
        Send fields to a domain root, buffering them until the root is known.

        Params:
            domain: Target domain
            fields: Fields or remote references to add to the root
            tail: Ancestor field names used for remote query strings
        """
        root = self.roots.setdefault(domain, DomainRoot())
        if root.adder is not None:
            root.adder(fields, tail)
            return

        logger.debug("Buffering %d field(s) for domain '%s'", len(fields), domain)
        root.buffer.extend(PendingField(item, tail) for item in fields)

    def is_resolved(self, domain: str) -> bool:
        root = self.roots.get(domain)
        return root is not None and root.is_resolved

    def pending(self, domain: str) -> list[PendingField]:
        """Return fields still waiting for the root of a domain."""
        root = self.roots.get(domain)
        return list(root.buffer) if root else []

    def domains(self) -> list[str]:
        return list(self.roots)

    def unresolved_domains(self) -> list[str]:
        """Domains that received fields but never had a root visited."""
        return [name for name, root in self.roots.items() if not root.is_resolved]
