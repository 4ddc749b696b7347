"""
Database definitions and collection constants.
"""
from lifeline.database.databases import core_db

__all__ = ["core_db"]
