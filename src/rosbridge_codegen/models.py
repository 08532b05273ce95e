"""Data models for ROS message, service and action schemas."""

from dataclasses import dataclass

from rosbridge_codegen.exceptions import InvalidFieldError

# Array length markers
SCALAR = -1
UNBOUNDED = 0


@dataclass(frozen=True)
class TypeName:
    """A bare type identifier with an optional namespace (e.g. ``geometry_msgs/msg/Pose``)."""

    name: str
    namespace: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        if self.namespace is not None:
            object.__setattr__(self, "namespace", tuple(self.namespace))

    @classmethod
    def parse(cls, package_and_name: str) -> "TypeName":
        """Build a TypeName from its ``/`` separated form."""
        parts = package_and_name.split("/")
        if len(parts) == 1:
            return cls(package_and_name)
        return cls(parts[-1], tuple(parts[:-1]))

    def with_suffix(self, suffix: str) -> "TypeName":
        """Return a sibling type whose name carries ``suffix``."""
        return TypeName(self.name + suffix, self.namespace)

    def __str__(self) -> str:
        if self.namespace is None:
            return self.name
        return "/".join((*self.namespace, self.name))


@dataclass(frozen=True)
class Field:
    """A named element of a schema payload.

    ``children`` is only non-empty for an inline nested complex type.
    ``array_length`` is ``-1`` for scalars, ``0`` for unbounded arrays and the
    element count for fixed-length arrays.
    """

    type: TypeName
    name: str
    children: tuple["Field", ...] = ()
    value: str | None = None
    array_length: int = SCALAR

    def __post_init__(self) -> None:
        object.__setattr__(self, "children", tuple(self.children))
        if self.array_length < SCALAR:
            raise InvalidFieldError(
                f"Field '{self.name}' has invalid array length {self.array_length}"
            )
        if self.value is not None:
            if self.is_array:
                raise InvalidFieldError(
                    f"Constant '{self.name}' uses array type '{self.type}'. "
                    "Constants must be scalar."
                )
            if self.children:
                raise InvalidFieldError(
                    f"Constant '{self.name}' carries nested fields. "
                    "Constants must use primitive types only."
                )

    @property
    def is_array(self) -> bool:
        return self.array_length >= UNBOUNDED

    @property
    def has_fixed_length(self) -> bool:
        return self.array_length >= 1

    @property
    def is_constant(self) -> bool:
        return self.value is not None

    @property
    def is_variable(self) -> bool:
        return self.value is None

    @property
    def is_complex(self) -> bool:
        return bool(self.children)

    def __str__(self) -> str:
        result = str(self.type)
        if self.is_array:
            result += f"[{self.array_length}]" if self.has_fixed_length else "[]"
        result += f" {self.name}"
        if self.value is not None:
            result += f"={self.value}"
        for child in self.children:
            result += "\n" + "\n".join(f"\t{line}" for line in str(child).splitlines())
        return result


@dataclass(frozen=True)
class Message:
    """A topic payload definition."""

    name: TypeName
    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))


@dataclass(frozen=True)
class Service:
    """A service definition (request and response)."""

    name: TypeName
    request: tuple[Field, ...] = ()
    response: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "request", tuple(self.request))
        object.__setattr__(self, "response", tuple(self.response))


@dataclass(frozen=True)
class Action:
    """An action definition (goal, result and feedback)."""

    name: TypeName
    goal: tuple[Field, ...] = ()
    result: tuple[Field, ...] = ()
    feedback: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        for part in ("goal", "result", "feedback"):
            object.__setattr__(self, part, tuple(getattr(self, part)))


Schema = Message | Service | Action


def variable_fields(fields: tuple[Field, ...]) -> list[Field]:
    """Return the fields that become constructor parameters, in declaration order."""
    return [f for f in fields if f.is_variable]


def constant_fields(fields: tuple[Field, ...]) -> list[Field]:
    """Return the constant fields, in declaration order."""
    return [f for f in fields if f.is_constant]
