# termmax_tools/types/constants.py

SECONDS_PER_DAY = 86400
DAYS_PER_YEAR = 365

DEFAULT_TOKEN_DECIMALS = 18
UNKNOWN_TOKEN = "Unknown"
