"""AMM (Automated Market Maker) pricing math."""

from cpamm.amm.base import AMM, Price, SwapResult
from cpamm.amm.constant_product import ConstantProduct, constant_product

__all__ = [
    # Base classes
    "AMM",
    "Price",
    "SwapResult",
    # Constant product
    "ConstantProduct",
    "constant_product",
]
