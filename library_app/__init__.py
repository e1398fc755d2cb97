"""Library App - Core Application Package

This package contains the lending service and its boundaries:
- Records and storage (book.py, person.py, store.py)
- Input validation and normalization (validators.py, normalization.py)
- Checkout rules and the lending service (rules.py, library.py)
- Lazy field resolution (resolvers.py)
- API endpoints (api.py) and CLI interface (main.py)
"""
