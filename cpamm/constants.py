"""Protocol constants for the constant-product AMM.

Centralizes numeric bounds and scaling factors shared by the pool engine.
"""

# Largest value an unsigned 64-bit amount can hold
UINT64_MAX = 2**64 - 1

# Fixed-point scale for integer prices (price = reserve_b * PRICE_SCALE // reserve_a)
# 1e9 keeps prices up to ~1.8e10 representable as u64
PRICE_SCALE = 10**9

# Basis point denominator (10000 bps = 100%)
BPS_DENOMINATOR = 10_000
