"""
Inventory Kernel

Shared foundation for the inventory costing packages:
- Money and currency value objects (Decimal only)
- Injectable clock
- Typed exception hierarchy
- Structured JSON logging
- SQLAlchemy base, engine/session management and ORM models
"""

__version__ = "0.1.0"
