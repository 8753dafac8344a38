"""
Print-Shop Kernel

Shared infrastructure for the reconciliation and fulfillment engine:
- Structured logging
- Typed exceptions
- SQLAlchemy persistence primitives
- Injectable clock and workflow value objects
"""

__version__ = "0.1.0"
