"""DataTables query errors — one discriminated type for every request failure."""

from __future__ import annotations

from enum import Enum
from typing import Any, ClassVar

from mp_datatables.kernel.errors.base import BaseError


class ErrorKind(str, Enum):
    MALFORMED_PARAMETERS = "malformed_parameters"
    STORE_OPERATION = "store_operation"


class DataTablesError(BaseError):
    """A request could not be answered.

    Callers branch on :attr:`kind` rather than on the error's shape.
    """

    default_code = "datatables_error"
    kind: ClassVar[ErrorKind]

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["kind"] = self.kind.value
        return payload


class MalformedParametersError(DataTablesError):
    """Raised before any store access when the descriptor cannot be used."""

    default_code = "malformed_parameters"
    kind = ErrorKind.MALFORMED_PARAMETERS


class DescriptorParseError(MalformedParametersError):
    """A descriptor value could not be parsed into its declared type.

    ``field`` names the offending key (``columns[2].searchable``,
    ``search.value``, ...).
    """

    default_code = "descriptor_parse_error"

    def __init__(self, field: str, value: object, expected: str) -> None:
        super().__init__(
            f"Cannot parse {field}={value!r}: expected {expected}",
            detail={"field": field, "value": repr(value), "expected": expected},
        )
        self.field = field
        self.value = value
        self.expected = expected


class StoreOperationError(DataTablesError):
    """A count or fetch against the document store failed.

    The store's exception is kept verbatim as :attr:`cause`.
    """

    default_code = "store_operation_error"
    kind = ErrorKind.STORE_OPERATION

    def __init__(self, operation: str, cause: BaseException) -> None:
        super().__init__(
            f"Store operation '{operation}' failed: {cause}",
            detail={"operation": operation},
            cause=cause,
        )
        self.operation = operation


__all__ = [
    "DataTablesError",
    "DescriptorParseError",
    "ErrorKind",
    "MalformedParametersError",
    "StoreOperationError",
]
