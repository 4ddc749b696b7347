"""
API Routers module.
"""
from lifeline.routers import auth, collections, dynamic_models, health

__all__ = ["auth", "collections", "dynamic_models", "health"]
