"""Emission of payload classes and the registry of classes written in one run."""

import logging
from collections.abc import Iterable
from pathlib import Path

from rosbridge_codegen.code_writer import ModuleBuilder, python_name
from rosbridge_codegen.models import Field, TypeName, constant_fields, variable_fields
from rosbridge_codegen.resolver import ClassName, TypeResolver

logger = logging.getLogger(__name__)

PY_SUFFIX = ".py"

DATACLASS = ClassName("dataclasses", "dataclass", generated=False)
CLASS_VAR = ClassName("typing", "ClassVar", generated=False)


class GenerationSession:
    """Tracks the classes emitted into one output root.

    Classes are keyed by their fully qualified name, so a class claimed once
    is never written again during the session. The registry is not shared
    between processes; concurrent sessions on the same output root race.
    """

    def __init__(self, output_root: Path) -> None:
        self.output_root = output_root
        self.written: list[Path] = []
        self.skipped: list[str] = []
        self._emitted: set[str] = set()

    def seed_from_output(self) -> int:
        """Register every module already present below the output root.

        Returns the number of registered classes.
        """
        if not self.output_root.is_dir():
            return 0
        count = 0
        for path in self.output_root.rglob(f"*{PY_SUFFIX}"):
            relative = path.relative_to(self.output_root).with_suffix("")
            self._emitted.add(".".join(relative.parts))
            count += 1
        logger.debug("Seeded %d existing classes from %s", count, self.output_root)
        return count

    def is_emitted(self, class_name: ClassName) -> bool:
        return class_name.canonical_name in self._emitted

    def claim(self, class_name: ClassName) -> bool:
        """Reserve ``class_name`` for emission; False if it was emitted before."""
        if self.is_emitted(class_name):
            logger.debug("Skipping %s, already emitted", class_name)
            self.skipped.append(class_name.canonical_name)
            return False
        self._emitted.add(class_name.canonical_name)
        return True

    def module_path(self, class_name: ClassName) -> Path:
        return self.output_root.joinpath(*class_name.module.split(".")).with_suffix(PY_SUFFIX)

    def write(self, class_name: ClassName, source: str) -> Path:
        path = self.module_path(class_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(source, encoding="utf-8")
        self.written.append(path)
        logger.debug("Wrote %s to %s", class_name, path)
        return path


def module_docstring(source: TypeName | str) -> str:
    return f"Generated from {source}. Do not edit."


class ClassEmitter:
    """Writes payload classes: one dataclass per type with its constants."""

    def __init__(self, resolver: TypeResolver, session: GenerationSession) -> None:
        self.resolver = resolver
        self.session = session

    def class_name_for(self, type_name: TypeName) -> ClassName:
        return ClassName(self.resolver.package_for(type_name.namespace), type_name.name)

    def emit_payload_class(
        self,
        type_name: TypeName,
        fields: Iterable[Field],
        base: ClassName | None = None,
    ) -> ClassName:
        """Emit the payload class for ``type_name`` and every inline type it uses.

        Returns the class name, whether or not it was written in this call.
        """
        fields = tuple(fields)
        self._check_constants(fields)
        class_name = self.class_name_for(type_name)
        self._emit(class_name, fields, type_name.namespace, base, str(type_name))
        return class_name

    def _check_constants(self, fields: tuple[Field, ...]) -> None:
        """Raise ``InvalidConstantType`` for a bad constant anywhere in the inline tree."""
        for field in fields:
            if field.is_constant:
                self.resolver.resolve_constant(field)
            elif field.is_complex:
                self._check_constants(field.children)

    def _emit(
        self,
        class_name: ClassName,
        fields: tuple[Field, ...],
        namespace: tuple[str, ...] | None,
        base: ClassName | None,
        source: str,
    ) -> None:
        if not self.session.claim(class_name):
            return

        for field in variable_fields(fields):
            if field.is_complex:
                nested_namespace = field.type.namespace
                if nested_namespace is None:
                    nested_namespace = namespace
                self._emit(
                    self.resolver.complex_class(field, namespace),
                    field.children,
                    nested_namespace,
                    None,
                    f"{source}.{field.name}",
                )

        builder = ModuleBuilder(class_name.module, module_docstring(source))
        self.render_class(builder, class_name, fields, namespace, base)
        self.session.write(class_name, builder.render())

    def render_class(
        self,
        builder: ModuleBuilder,
        class_name: ClassName,
        fields: tuple[Field, ...],
        namespace: tuple[str, ...] | None,
        base: ClassName | None,
    ) -> None:
        """Append the class definition to ``builder``."""
        constants = [
            (field, self.resolver.resolve_constant(field)) for field in constant_fields(fields)
        ]
        variables = [
            (field, self.resolver.resolve(field, namespace)) for field in variable_fields(fields)
        ]

        code = builder.code
        name = builder.define(class_name)
        bases = f"({builder.ref(base)})" if base is not None else ""
        code.append(f"@{builder.ref(DATACLASS)}")
        with code.indent(f"class {name}{bases}:"):
            if constants:
                class_var = builder.ref(CLASS_VAR)
                for field, constant_type in constants:
                    code.append(
                        f"{python_name(field.name)}: "
                        f"{class_var}[{builder.ref(constant_type)}] = {field.value}"
                    )
            if constants and variables:
                code.blank_line()
            for field, field_type in variables:
                code.append(f"{python_name(field.name)}: {builder.ref(field_type)}")
            if not constants and not variables:
                code.append("pass")
