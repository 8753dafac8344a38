"""
Module ORM Registry (``printshop_modules._orm_registry``).

Responsibility
--------------
Ensure every module-level SQLAlchemy ORM model is imported so that
``Base.metadata`` contains its table definition before tables are created,
and so that string-based relationships and foreign keys resolve.

Architecture position
---------------------
**Modules layer** -- utility.  Called by ``printshop_kernel.db.engine``'s
``create_tables()`` through a deferred import, and by ``tests/conftest.py``.
"""


def import_all_orm_models() -> None:
    """Import every ``printshop_modules.*.orm`` module.

    Parents come before children so foreign keys resolve (customers and
    orders before invoices; invoices before payments and commissions).

    This function is idempotent -- repeated calls are harmless.
    """
    # fmt: off
    import printshop_modules.catalog.orm  # noqa: F401
    import printshop_modules.orders.orm  # noqa: F401
    import printshop_modules.invoicing.orm  # noqa: F401
    import printshop_modules.payments.orm  # noqa: F401
    import printshop_modules.commissions.orm  # noqa: F401
    import printshop_modules.fulfillment.orm  # noqa: F401
    import printshop_modules.reporting.orm  # noqa: F401
    # fmt: on


def create_all_tables() -> None:
    """Register every module ORM model, then create all tables.

    Preconditions:
        Engine must be initialized via ``init_engine_from_url()``.
    """
    from printshop_kernel.db.engine import create_tables

    import_all_orm_models()
    create_tables()
