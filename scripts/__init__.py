"""
Scripts Package.

This package contains operational scripts for the trade order
system.

Scripts:
- bootstrap_db: Database initialization and reference codes
"""

# Scripts are meant to be run directly, not imported
