"""
Core - Shared Database Infrastructure for the Careers Platform

This package provides foundational database components:
- Base models with UUID primary keys and timestamps
- Optimistic locking support for aggregate records
"""
