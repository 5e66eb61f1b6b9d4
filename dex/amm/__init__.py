"""Pools and their pricing math."""

from dex.amm.base import AMM
from dex.amm.constant_product import ConstantProductMath
from dex.amm.pair import Pair, PairState

__all__ = ["AMM", "ConstantProductMath", "Pair", "PairState"]
