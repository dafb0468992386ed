"""HTTP chat relay (FastAPI) and its provider-agnostic service."""
