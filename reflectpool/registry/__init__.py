"""Registry — the directory every identifier, alias and class reflect lives in.

The registry provides:
- Declaration: identifiers and aliases keyed by their declaring function
- Lookup: by function, fully-qualified name, or identifier object
- Reflection: one class reflect per class, created on first use

``reflect_pool`` is the process-wide default used by the declaration helpers
in ``reflectpool.annotations``; independent ``Registry`` objects can be built
for isolation.
"""

from reflectpool.config import ReflectConfig
from reflectpool.registry.pool import Registry

reflect_pool = Registry(ReflectConfig.from_env())

__all__ = ["Registry", "reflect_pool"]
