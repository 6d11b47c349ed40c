from decimal import Decimal

# Fixed total supply in NANO
MAX_SUPPLY = Decimal(133248289)

# Representatives at or above 0.01% of supply rebroadcast votes
REBROADCASTABLE_THRESHOLD = MAX_SUPPLY * Decimal("0.0001")

# 1 NANO = 10^30 raw
RAW_PER_NANO = Decimal(10**30)

# Delay between the end of one poll cycle and the start of the next (seconds)
POLL_INTERVAL = 10.0

DEFAULT_RPC_URL = "http://127.0.0.1:7076"
DEFAULT_TIMEOUT = 5.0
