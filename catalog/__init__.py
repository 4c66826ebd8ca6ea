"""
Catalog package for the Library Catalog API.

This package contains:
- Book record model and search filter
- In-memory catalog store (list, search, add, update, delete)
- Borrow/return lifecycle and recommendations
- Seed catalog loaded at startup
"""

__version__ = "1.0.0"
