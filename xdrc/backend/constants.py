"""XDR wire-format constants (RFC 4506).

All quantities are in bytes unless stated otherwise.
"""

# ============================================================================
# Alignment
# ============================================================================

XDR_UNIT = 4                 # Every item occupies a multiple of four bytes


def pad4(n: int) -> int:
    """Round a byte count up to the next XDR unit."""
    return (n + XDR_UNIT - 1) // XDR_UNIT * XDR_UNIT


def padding_of(n: int) -> int:
    """Number of zero bytes that follow `n` bytes of opaque data."""
    return pad4(n) - n


# ============================================================================
# Item Sizes
# ============================================================================

WORD_SIZE_BYTES = 4          # int, unsigned int, float, bool, enum
LENGTH_PREFIX_BYTES = 4      # Count word before variable arrays, opaque and strings
DISCRIMINANT_SIZE_BYTES = 4  # Union discriminant
OPTIONAL_FLAG_BYTES = 4      # Presence word before optional data

# ============================================================================
# Limits
# ============================================================================

U32_MAX = (1 << 32) - 1      # Largest encodable length or bound
U64_MAX = (1 << 64) - 1      # Largest size the generated constants can state

# ============================================================================
# Decoding
# ============================================================================

DEFAULT_MAX_DEPTH = 128      # Definitions a decode may nest before DepthLimitExceeded
