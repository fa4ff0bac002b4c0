"""
SQL Inspect Web API
===================
FastAPI-based REST API for SQL review.

Quick Start:
    uvicorn sql_inspect.web_api.main:app --reload
"""
from .main import app

__all__ = ["app"]
