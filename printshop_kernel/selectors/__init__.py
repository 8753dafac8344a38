"""Read-only query selectors."""

from printshop_kernel.selectors.base import BaseSelector

__all__ = ["BaseSelector"]
