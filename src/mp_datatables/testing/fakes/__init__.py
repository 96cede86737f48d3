"""Testing fakes – in-memory doubles for application ports."""
from mp_datatables.testing.fakes.document_store import InMemoryDocumentStore

__all__ = ["InMemoryDocumentStore"]
