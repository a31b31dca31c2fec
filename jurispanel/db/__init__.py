# jurispanel/db/__init__.py

"""
Database Module

Contains SQLAlchemy models, Pydantic schemas, and database configuration.
"""

from jurispanel.db.database import Base, engine, SessionLocal, get_db, init_db
from jurispanel.db import models, schemas

__all__ = [
    'Base',
    'engine',
    'SessionLocal',
    'get_db',
    'init_db',
    'models',
    'schemas'
]
