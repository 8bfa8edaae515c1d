"""Exceptions raised by the registry and the reflection graph.

Every failure is a configuration-time developer error: it is raised
synchronously and never retried. Each class carries a machine-readable
``code`` and the ``context`` the error was raised with.
"""

from __future__ import annotations

from typing import Any


class ReflectionError(Exception):
    """Base class for every reflectpool error."""

    code = "reflection.error"

    def __init__(self, message: str = "", **context: Any) -> None:
        self.context = context
        if not message:
            message = self.code
        if context:
            details = ", ".join(f"{k}={v!r}" for k, v in context.items())
            message = f"{message} ({details})"
        super().__init__(message)


# --- Reference errors ---


class InvalidDecoratorReference(ReflectionError, TypeError):
    """Neither an identifier, an identifier/alias function nor a registered name."""

    code = "reflection.invalid-decorator"


class InvalidClassReference(ReflectionError, TypeError):
    """A class lookup received an unsupported shape or an unknown name."""

    code = "reflection.invalid-class"


class ClassNotFound(ReflectionError, LookupError):
    code = "class.not.found"


class IdentifierNotFound(ReflectionError, LookupError):
    code = "identifier.not.found"


class AliasNotFound(ReflectionError, LookupError):
    code = "alias.not.found"


# --- Attachment errors ---


class TargetNotAllowed(ReflectionError):
    """The identifier's target flags forbid the attachment site."""

    code = "not.allowed.target"


class PropertyNameEmpty(ReflectionError):
    code = "property.name.empty"


class MethodBodyEmpty(ReflectionError):
    code = "method.body.empty"


class NotUsedForStaticMember(ReflectionError):
    code = "not.used.for.static.member"


class NotUsedForInstanceMember(ReflectionError):
    code = "not.used.for.instance.member"


class InvalidTarget(ReflectionError):
    """An instance was viewed as a target kind it is not."""

    code = "invalid.target"


class InvalidKeyword(ReflectionError, ValueError):
    code = "invalid.keyword"


# --- Value errors ---


class SingleNotSupported(ReflectionError):
    """Scalar extraction on an identifier without a ``single`` key."""

    code = "single.not.supported"


# --- Registration errors ---


class IdentifierShouldBeFunction(ReflectionError, TypeError):
    code = "identifier.should.be.function"


class AliasShouldBeFunction(ReflectionError, TypeError):
    code = "alias.should.be.function"


class ConditionShouldBeFunction(ReflectionError, TypeError):
    code = "condition.should.be.function"


class ReferencedFunctionShouldBeDecorator(ReflectionError, LookupError):
    code = "referenced.function.should.be.decorator"


# --- Configuration ---


class ConfigError(ReflectionError, ValueError):
    code = "config.invalid"
