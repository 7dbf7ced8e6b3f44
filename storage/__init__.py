"""
Storage Package.

This package manages all persistence of the brokerage data store.

Modules:
- models/: ORM models
- repositories/: Data access layer
"""
