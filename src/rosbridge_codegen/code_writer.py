import keyword
import textwrap
import types
from collections import defaultdict
from collections.abc import Generator
from contextlib import contextmanager

from rosbridge_codegen.resolver import ClassName, ListOf, TypeRef

# Modules referenced by attribute instead of importing names from them
MODULE_IMPORTS = frozenset({"numpy"})

# Valid ROS field names that cannot be Python identifiers in generated methods
RESERVED_NAMES = frozenset({*keyword.kwlist, "self"})


def python_name(name: str) -> str:
    """Map a schema field name to a Python-safe identifier.

    Keywords and ``self`` get a trailing underscore, e.g. ``lambda`` becomes
    ``lambda_``.
    """
    if name in RESERVED_NAMES:
        return f"{name}_"
    return name


def unique_name(name: str, taken: set[str]) -> str:
    """Append underscores to ``name`` until it is not in ``taken``."""
    while name in taken:
        name += "_"
    return name


class CodeWriter:
    def __init__(self) -> None:
        self._lines: list[str] = []
        self._level = 0
        self._indentation = "    "

    def append(self, lines: "str | CodeWriter | None") -> None:
        if lines is None:
            return

        for line in str(lines).splitlines():
            if line.strip():
                self._lines.append(textwrap.indent(line, self._indentation * self._level))

    def blank_line(self) -> None:
        """Adds an empty line unless the previous one is empty already."""
        if self._lines and self._lines[-1]:
            self._lines.append("")

    def __enter__(self) -> "CodeWriter":
        self._level += 1
        return self

    def __exit__(
        self,
        exc_: type[BaseException] | None,
        exc_type_: BaseException | None,
        tb_: types.TracebackType | None,
    ) -> None:
        self._level -= 1

    @contextmanager
    def indent(self, lines: str | None) -> Generator["CodeWriter", None, None]:
        if lines is not None:
            self.append(lines)
        self._level += 1
        try:
            yield self
        finally:
            self._level -= 1

    def __str__(self) -> str:
        return "\n".join(self._lines)

    def get_code(self) -> str:
        return "\n".join(self._lines)


class ModuleBuilder:
    """Builds the source of one generated module and tracks the imports it needs.

    Type references are rendered through :meth:`ref`, which records the import
    and returns the name to use in code. A name that is already taken by a
    different class is imported under an alias.
    """

    def __init__(self, module: str, docstring: str | None = None) -> None:
        self.module = module
        self.docstring = docstring
        self.code = CodeWriter()
        self._plain_imports: set[str] = set()
        self._from_imports: dict[str, dict[str, str]] = defaultdict(dict)
        self._names: dict[str, str] = {}

    def define(self, class_name: ClassName) -> str:
        """Register a class defined in this module."""
        self._names[class_name.simple_name] = class_name.canonical_name
        return class_name.simple_name

    def import_module(self, module: str) -> str:
        self._plain_imports.add(module)
        return module

    def import_from(self, module: str, name: str) -> str:
        canonical = f"{module}.{name}"
        if (alias := self._from_imports[module].get(name)) is not None:
            return alias
        alias = name
        if self._names.get(alias, canonical) != canonical:
            alias = "_".join((*module.split("."), name))
        self._names[alias] = canonical
        self._from_imports[module][name] = alias
        return alias

    def ref(self, type_ref: TypeRef) -> str:
        """Return the expression for ``type_ref`` and record its import."""
        if isinstance(type_ref, ListOf):
            return f"list[{self.ref(type_ref.element)}]"
        if type_ref.package == "builtins":
            return type_ref.simple_name
        if self._names.get(type_ref.simple_name) == type_ref.canonical_name and (
            type_ref.module == self.module
        ):
            return type_ref.simple_name
        if type_ref.package in MODULE_IMPORTS:
            return f"{self.import_module(type_ref.package)}.{type_ref.simple_name}"
        return self.import_from(type_ref.module, type_ref.simple_name)

    def _render_imports(self) -> list[str]:
        lines = [f"import {module}" for module in sorted(self._plain_imports)]
        for module in sorted(self._from_imports):
            names = []
            for name, alias in sorted(self._from_imports[module].items()):
                names.append(name if name == alias else f"{name} as {alias}")
            lines.append(f"from {module} import {', '.join(names)}")
        return lines

    def render(self) -> str:
        parts: list[str] = []
        if self.docstring:
            parts.append(f'"""{self.docstring}"""\n')
        parts.append("from __future__ import annotations\n")
        imports = self._render_imports()
        if imports:
            parts.append("\n".join(imports) + "\n")
        parts.append("\n" + self.code.get_code())
        return "\n".join(parts).rstrip() + "\n"
