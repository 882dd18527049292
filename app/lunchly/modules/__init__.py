"""
Feature modules live under this package.

Each module owns its models, store (service.py) and routes (admin.py), and
reuses the platform primitives (DB session, store errors, CSRF).
"""
