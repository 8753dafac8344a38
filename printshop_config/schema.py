"""
Print-Shop Configuration Schema.

Defines the structure and sensible defaults for shop-wide money and
invoicing settings.  Actual values are loaded from YAML at runtime
(see ``printshop_config.loader``).
"""

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Self

from printshop_kernel.logging_config import get_logger

logger = get_logger("config.schema")

SHRINK_POLICIES = frozenset({"reject", "flag"})


@dataclass
class ShopConfig:
    """
    Configuration schema for the reconciliation and fulfillment engine.

    Override at instantiation with shop-specific values:

        config = ShopConfig(vat_enabled=True, vat_percentage=Decimal("16"))
    """

    # Tax
    vat_enabled: bool = False
    vat_percentage: Decimal = Decimal("0")

    # Money
    money_decimal_places: int = 2
    outstanding_tolerance: Decimal = Decimal("0.01")

    # Invoice numbering
    draft_number_prefix: str = "DRAFT-"
    placeholder_numbers: tuple[str, ...] = ("PENDING",)

    # What happens when an item edit drops the total below amount_paid
    shrink_policy: str = "reject"  # "reject", "flag"

    # Accepted payment methods
    payment_methods: tuple[str, ...] = field(
        default_factory=lambda: ("cash", "bank_transfer", "mobile_money", "cheque", "card")
    )

    def __post_init__(self):
        self.vat_percentage = Decimal(str(self.vat_percentage))
        self.outstanding_tolerance = Decimal(str(self.outstanding_tolerance))
        self.placeholder_numbers = tuple(self.placeholder_numbers)
        self.payment_methods = tuple(self.payment_methods)

        if self.vat_percentage < 0:
            raise ValueError("vat_percentage cannot be negative")
        if self.vat_percentage > Decimal("100"):
            raise ValueError("vat_percentage cannot exceed 100%")
        if not 0 <= self.money_decimal_places <= 6:
            raise ValueError("money_decimal_places must be between 0 and 6")
        if self.outstanding_tolerance < 0:
            raise ValueError("outstanding_tolerance cannot be negative")
        if not self.draft_number_prefix or not self.draft_number_prefix.strip():
            raise ValueError("draft_number_prefix cannot be empty")
        if self.shrink_policy not in SHRINK_POLICIES:
            raise ValueError(
                f"shrink_policy must be one of {sorted(SHRINK_POLICIES)}, "
                f"got '{self.shrink_policy}'"
            )
        if not self.payment_methods:
            raise ValueError("payment_methods cannot be empty")

        logger.info(
            "shop_config_initialized",
            extra={
                "vat_enabled": self.vat_enabled,
                "vat_percentage": str(self.vat_percentage),
                "money_decimal_places": self.money_decimal_places,
                "shrink_policy": self.shrink_policy,
                "payment_methods": list(self.payment_methods),
            },
        )

    @property
    def effective_vat_percentage(self) -> Decimal | None:
        """VAT rate to apply, or None when VAT is switched off."""
        return self.vat_percentage if self.vat_enabled else None

    def is_placeholder_number(self, number: str | None) -> bool:
        """True for an empty, ``PENDING``-style or ``DRAFT-*`` number."""
        if number is None or not number.strip():
            return True
        number = number.strip()
        return number in self.placeholder_numbers or number.startswith(self.draft_number_prefix)

    @classmethod
    def with_defaults(cls) -> Self:
        """Create config with the stock defaults."""
        logger.info("shop_config_created_with_defaults")
        return cls()

    @classmethod
    def from_dict(cls, data: dict) -> Self:
        """Create config from a dictionary (e.g. a parsed YAML document)."""
        logger.info(
            "shop_config_loading_from_dict",
            extra={"keys": sorted(data.keys())},
        )
        unknown = set(data) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {sorted(unknown)}")
        return cls(**data)
