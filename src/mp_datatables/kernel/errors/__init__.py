"""Kernel error hierarchy — public re-export surface.

Hierarchy::

    BaseError
    └── DataTablesError              (datatables.py, tagged with ErrorKind)
        ├── MalformedParametersError
        │   └── DescriptorParseError
        └── StoreOperationError
"""

from mp_datatables.kernel.errors.base import BaseError
from mp_datatables.kernel.errors.datatables import (
    DataTablesError,
    DescriptorParseError,
    ErrorKind,
    MalformedParametersError,
    StoreOperationError,
)

__all__ = [
    "BaseError",
    "DataTablesError",
    "DescriptorParseError",
    "ErrorKind",
    "MalformedParametersError",
    "StoreOperationError",
]
