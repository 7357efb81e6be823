"""
Structure components shared across a single traversal.
"""

from forman_schema.structure.registry import DomainRoot, DomainRootRegistry, PendingField

__all__ = [
    "DomainRoot",
    "DomainRootRegistry",
    "PendingField",
]
