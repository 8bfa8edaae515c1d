"""reflectpool — annotation registry and class-structure reflection engine.

Declare annotation identifiers, attach them to classes, methods, fields and
parameters, then query the attached values with inheritance-aware resolution.
"""

__version__ = "0.3.0"
