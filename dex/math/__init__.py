"""Mathematical utilities for the exchange engine.

- fixed_point: UQ112.112 binary fixed-point used by the price accumulators
"""

from dex.math.fixed_point import Q112, RESOLUTION, decode, encode, fraction, mul_decode, uqdiv

__all__ = ["Q112", "RESOLUTION", "decode", "encode", "fraction", "mul_decode", "uqdiv"]
