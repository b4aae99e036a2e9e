"""Constants and policy thresholds for lanebook."""

# Frames summarized by counts before the literal tenth frame
COUNTED_FRAMES = 9
TOTAL_FRAMES = 10

PINS_PER_RACK = 10
MAX_TENTH_FRAME_BALLS = 3
MAX_TENTH_FRAME_PINS = 30
PERFECT_GAME = 300

# Tenth frame notation symbols
STRIKE = 'X'
SPARE = '/'
MISS = '-'
DIGITS = '0123456789'
NOTATION_ALPHABET = frozenset(STRIKE + SPARE + MISS + DIGITS)

# Player/team statistics policy
SCORE_THRESHOLD = 200
RECENT_WINDOW = 10
TYPICAL_WINDOW = 30
TYPICAL_MIN_GAMES = 10
TYPICAL_LOW_PERCENTILE = 0.2
TYPICAL_HIGH_PERCENTILE = 0.8

# Anything smaller than a cent is considered settled
SETTLEMENT_EPSILON = 0.01

# Leaderboard sizes
TOP_GAMES_LIMIT = 10
TOP_SESSIONS_LIMIT = 5
TOP_AVERAGES_LIMIT = 5
REPORT_TOP_PLAYERS = 3

# Head-to-head comparisons closer than this are ties
TIE_TOLERANCE = 0.0001

# Default level for setup_logging
LOG_LEVEL = 'INFO'
LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

UNKNOWN_PLAYER = 'Unknown'
SETTLEMENT_EXPENSE_NAME = 'Settlement Payment'
