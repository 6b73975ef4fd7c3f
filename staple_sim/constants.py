"""Protocol constants for the Staple simulation engine.

Centralizes fixed-point precisions and the chain-integer scales used by
pool and VTP parameters.
"""

# WAD fixed-point (18 implied decimals) used for every price and ratio
WAD_DECIMALS = 18
WAD = 10**WAD_DECIMALS
WAD_SQUARED = WAD * WAD

# Swap fees are stored on chain in parts-per-million
FEE_RATE_DECIMALS = 6
FEE_RATE_ONE = 10**FEE_RATE_DECIMALS

# protocolFeeRate, maxAllocateRate, alrLowerBound and VTP p use 4 decimals
# (percent * 100, so 10000 == 100%)
BPS_DECIMALS = 4
BPS_ONE = 10**BPS_DECIMALS

# LP shares are always 18-decimal regardless of the underlying token
SHARE_DECIMALS = 18

# swapGet divides by 10^(36 - decimalsOut), so token decimals must not exceed 36
MAX_TOKEN_DECIMALS = 36
DEFAULT_TOKEN_DECIMALS = 18

# Scale factor lifting a 4-decimal rate into WAD (p * 1e14)
BPS_TO_WAD = 10 ** (WAD_DECIMALS - BPS_DECIMALS)
