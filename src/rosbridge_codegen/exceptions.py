class CodegenError(Exception):
    pass


class InvalidConstantType(CodegenError, TypeError):
    def __init__(self, field_name: str, type_name: object) -> None:
        self.field_name = field_name
        self.type_name = str(type_name)
        super().__init__(
            f"constant '{field_name}' has non-primitive type '{self.type_name}', "
            "constants must use primitive types only"
        )


class InvalidFieldError(CodegenError, ValueError):
    pass


class SchemaLoadError(CodegenError, ValueError):
    def __init__(self, source: str, reason: str) -> None:
        super().__init__(f"cannot load schemas from {source}: {reason}")
