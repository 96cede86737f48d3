"""MongoDB adapter — DataTables document store over motor.

Requires the ``mongodb`` extra::

    pip install "mp-datatables[mongodb]"
"""

from mp_datatables.adapters.mongodb.store import MongoDocumentStore

__all__ = ["MongoDocumentStore"]
