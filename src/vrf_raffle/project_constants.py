"""
Immutable public rules of the raffle.

These values define how a round is entered and resolved.
Changing them changes eligibility and MUST be publicly announced.
"""

# Native currency uses 18 decimals (wei-style base units)
TOKEN_DECIMALS = 18

# Default entrance fee (raw units): 0.01 token
DEFAULT_ENTRANCE_FEE = 10**16

# Minimum seconds between resolutions
DEFAULT_INTERVAL = 30

# VRF request parameters
DEFAULT_KEY_HASH = "0xd89b2bf150e3b9e13446986e571fb9cab24b13cea0a43ea20a6049a85cc807cc"
DEFAULT_SUBSCRIPTION_ID = 1
DEFAULT_CONFIRMATIONS = 3
DEFAULT_CALLBACK_GAS_LIMIT = 500_000

# Exactly one random word decides the winner
NUM_WORDS = 1

# Identity the local coordinator signs callbacks with
LOCAL_COORDINATOR_ADDRESS = "VRFCoordinator1111111111111111111111111111"
