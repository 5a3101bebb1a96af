"""HTTP interface for ristream (FastAPI)."""
