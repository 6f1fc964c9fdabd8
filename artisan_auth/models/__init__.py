"""
SQLAlchemy ORM models package.

All models are imported here so that Base.metadata knows about every table
before create_all() runs, and so other modules can import from
artisan_auth.models directly.
"""

from artisan_auth.models.account import Account  # noqa: F401
