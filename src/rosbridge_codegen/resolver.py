"""Resolution of schema fields to the Python types used by generated bindings."""

import logging
from dataclasses import dataclass

from rosbridge_codegen.exceptions import InvalidConstantType
from rosbridge_codegen.models import Field, TypeName

logger = logging.getLogger(__name__)

RUNTIME_PACKAGE = "rosbridge_client"

# Hand-written peer types for the common message families live here
DEFAULT_PACKAGE = f"{RUNTIME_PACKAGE}.messages"
DEFAULT_PACKAGES = frozenset(
    {
        "actionlib_msgs",
        "nav_msgs",
        "shape_msgs",
        "stereo_msgs",
        "diagnostic_msgs",
        "rosgraph_msgs",
        "std_msgs",
        "trajectory_msgs",
        "geometry_msgs",
        "sensor_msgs",
        "std_srvs",
        "visualization_msgs",
    }
)

MSG_SEGMENT = "msg"
SRV_SEGMENT = "srv"


@dataclass(frozen=True)
class ClassName:
    """A Python class reference.

    Generated classes live in a module of their own named after the class,
    so ``generated`` decides whether the module is ``package`` or
    ``package.simple_name``.
    """

    package: str
    simple_name: str
    generated: bool = True

    @property
    def module(self) -> str:
        if self.generated:
            return join_package(self.package, self.simple_name)
        return self.package

    @property
    def canonical_name(self) -> str:
        if self.package == "builtins":
            return self.simple_name
        return join_package(self.package, self.simple_name)

    def __str__(self) -> str:
        return self.canonical_name


@dataclass(frozen=True)
class ListOf:
    """A sequence of ``element``; array arity is not part of the type."""

    element: ClassName

    def __str__(self) -> str:
        return f"list[{self.element}]"


TypeRef = ClassName | ListOf


def _builtin(name: str) -> ClassName:
    return ClassName("builtins", name, generated=False)


def _numpy(name: str) -> ClassName:
    return ClassName("numpy", name, generated=False)


BOOL = _builtin("bool")
STR = _builtin("str")
FLOAT = _builtin("float")
INT8 = _numpy("int8")
INT16 = _numpy("int16")
INT32 = _numpy("int32")
INT64 = _numpy("int64")
FLOAT32 = _numpy("float32")

# Unsigned types widen to the next signed host type; uint64 shares int64 and
# loses its top bit.
PRIMITIVE_TYPES: dict[TypeName, ClassName] = {
    TypeName("bool"): BOOL,
    TypeName("byte"): INT8,
    TypeName("char"): STR,
    TypeName("string"): STR,
    TypeName("wstring"): STR,
    TypeName("float32"): FLOAT32,
    TypeName("float64"): FLOAT,
    TypeName("int8"): INT8,
    TypeName("uint8"): INT16,
    TypeName("int16"): INT16,
    TypeName("uint16"): INT32,
    TypeName("int32"): INT64,
    TypeName("uint32"): INT64,
    TypeName("int64"): INT64,
    TypeName("uint64"): INT64,
}

# Bare well-known names and the namespace/class they always map to
BUILTIN_TYPES: dict[TypeName, tuple[tuple[str, ...], str]] = {
    TypeName("Header"): (("std_msgs", MSG_SEGMENT), "Header"),
    TypeName("time"): (("primitive", MSG_SEGMENT), "Time"),
    TypeName("duration"): (("primitive", MSG_SEGMENT), "Duration"),
}


def join_package(*parts: str) -> str:
    """Join dotted package parts, skipping empty ones."""
    return ".".join(part for part in parts if part)


def is_primitive(type_name: TypeName) -> bool:
    return type_name in PRIMITIVE_TYPES


class TypeResolver:
    """Maps schema fields to Python type references.

    ``package_prefix`` is prepended to every generated package except the
    well-known message families, which always resolve below
    :data:`DEFAULT_PACKAGE`.
    """

    def __init__(self, package_prefix: str = "") -> None:
        self.package_prefix = package_prefix.strip(".")

    def package_for(self, namespace: tuple[str, ...] | None) -> str:
        """Return the prefixed dotted package for a schema namespace."""
        if namespace is None:
            return self.package_prefix
        return join_package(self.package_prefix, *namespace)

    def resolve(self, field: Field, enclosing_namespace: tuple[str, ...] | None) -> TypeRef:
        """Resolve the Python type of ``field`` declared inside ``enclosing_namespace``."""
        base = self._resolve_scalar(field, enclosing_namespace)
        resolved: TypeRef = ListOf(base) if field.is_array else base
        logger.debug("Resolved %s -> %s", field.name, resolved)
        return resolved

    def resolve_constant(self, field: Field) -> ClassName:
        """Resolve the type of a constant, which must be primitive and is never a list."""
        try:
            return PRIMITIVE_TYPES[field.type]
        except KeyError:
            raise InvalidConstantType(field.name, field.type) from None

    def complex_class(
        self, field: Field, enclosing_namespace: tuple[str, ...] | None
    ) -> ClassName:
        """Return the class a complex field refers to, ignoring array wrapping."""
        namespace = field.type.namespace
        if namespace is None:
            namespace = enclosing_namespace
        elif any(segment in DEFAULT_PACKAGES for segment in namespace):
            if namespace[-1] != MSG_SEGMENT:
                namespace = (*namespace, MSG_SEGMENT)
            return ClassName(join_package(DEFAULT_PACKAGE, *namespace), field.type.name)

        if namespace:
            if namespace[-1] == SRV_SEGMENT:
                namespace = (*namespace[:-1], MSG_SEGMENT)
            elif namespace[-1] != MSG_SEGMENT:
                namespace = (*namespace, MSG_SEGMENT)
        return ClassName(self.package_for(namespace), field.type.name)

    def _resolve_scalar(
        self, field: Field, enclosing_namespace: tuple[str, ...] | None
    ) -> ClassName:
        if builtin := BUILTIN_TYPES.get(field.type):
            namespace, name = builtin
            return ClassName(self.package_for(namespace), name)
        if primitive := PRIMITIVE_TYPES.get(field.type):
            return primitive
        return self.complex_class(field, enclosing_namespace)
