"""Adapters – HTTP listener (FastAPI + uvicorn) and SQLAlchemy store."""
