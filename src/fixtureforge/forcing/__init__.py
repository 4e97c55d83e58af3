"""Instance forcing: construct, synthesize or bypass-allocate."""

from fixtureforge.forcing.ops import allocate_without_constructor, construct, force_instance

__all__ = [
    "allocate_without_constructor",
    "construct",
    "force_instance",
]
