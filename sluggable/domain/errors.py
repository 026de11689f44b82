from __future__ import annotations

from typing import Optional


class SluggableError(Exception):
    pass


class InvalidConfigurationError(SluggableError):
    def __init__(
        self,
        option: str,
        reason: str,
        record_type: Optional[str] = None,
        attribute: Optional[str] = None,
    ):
        target = f" for {record_type}:{attribute}" if record_type and attribute else ""
        super().__init__(f'Sluggable "{option}"{target} {reason}')
        self.option = option
        self.reason = reason
        self.record_type = record_type
        self.attribute = attribute


class AmbiguousArgumentError(SluggableError):
    def __init__(self, argument_type: str):
        super().__init__(
            f"create_slug expects a mapping or None as the config argument; {argument_type} given"
        )
        self.argument_type = argument_type


class InvalidSourceValueError(SluggableError):
    def __init__(self, field: str, value_type: str):
        super().__init__(f"Cannot build a slug from {value_type} value of {field}")
        self.field = field
        self.value_type = value_type


class SlugStoreError(SluggableError):
    def __init__(self, operation: str, reason: str):
        super().__init__(f"Slug store error during {operation}: {reason}")
        self.operation = operation
        self.reason = reason
