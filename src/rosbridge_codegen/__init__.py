"""Typed rosbridge client bindings generated from ROS interface schemas.

Schemas are built with the models in :mod:`rosbridge_codegen.models` (or
loaded with :func:`rosbridge_codegen.loader.load_schemas`) and written with
:class:`rosbridge_codegen.writer.Writer`.
"""

__version__ = "0.1.0"

from .config import GeneratorConfig
from .exceptions import CodegenError, InvalidConstantType, InvalidFieldError, SchemaLoadError
from .loader import load_schemas, parse_schemas
from .models import Action, Field, Message, Schema, Service, TypeName
from .resolver import ClassName, ListOf, TypeResolver
from .writer import Writer

__all__ = [
    "Action",
    "ClassName",
    "CodegenError",
    "Field",
    "GeneratorConfig",
    "InvalidConstantType",
    "InvalidFieldError",
    "ListOf",
    "Message",
    "Schema",
    "SchemaLoadError",
    "Service",
    "TypeName",
    "TypeResolver",
    "Writer",
    "__version__",
    "load_schemas",
    "parse_schemas",
]
