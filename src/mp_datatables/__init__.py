"""
mp_datatables – DataTables server-side processing over MongoDB.

Import path convention::

    from mp_datatables.application.datatables import datatables_query
    from mp_datatables.adapters.mongodb import MongoDocumentStore
    from mp_datatables.kernel.errors import DataTablesError
"""

__version__ = "0.1.0"
__all__ = ["__version__"]
