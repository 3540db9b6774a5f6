"""
Authentication routers - /api/auth/*
Handles login and identity introspection.
"""

from .routes import router

__all__ = ["router"]
