"""
FastAPI RESTful API for the Library Catalog.

This module provides a REST API for:
- Catalog browsing and search
- Adding, updating and deleting books
- Borrowing and returning books
- Recommendations
"""
