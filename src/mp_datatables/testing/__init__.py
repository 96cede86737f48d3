"""Testing helpers – fakes for exercising DataTables queries without MongoDB."""
from mp_datatables.testing.fakes import InMemoryDocumentStore

__all__ = ["InMemoryDocumentStore"]
