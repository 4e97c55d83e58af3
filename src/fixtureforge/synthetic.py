"""Default namespace for synthetic implementation types.

Populated at runtime by ``fixtureforge.synthesis.synthesize``; every class
published here is importable as ``fixtureforge.synthetic.<Name>_implementation``
and carries a ``__synthesized_from__`` attribute naming its abstract original.
"""

__all__: list[str] = []
