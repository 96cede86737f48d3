"""Application layer – DataTables query compilation and orchestration."""
