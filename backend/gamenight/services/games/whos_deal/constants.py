SUITS = ['spades', 'hearts', 'diamonds', 'clubs']
RANKS = ['9', '10', 'J', 'Q', 'K', 'A']

SEAT_COUNT = 4
CARDS_PER_HAND = 5
KITTY_SIZE = 4
TRICKS_PER_ROUND = 5

DEFAULT_TARGET_SCORE = 10
ALLOWED_TARGET_SCORES = (5, 7, 10, 11)

# Points: (calling team took all five, took three or four, defenders on a euchre)
MARCH_POINTS = 2
ALONE_MARCH_POINTS = 4
MADE_POINTS = 1
EUCHRE_POINTS = 2

# Seconds
BOT_ACTION_DELAY = (1.0, 2.5)
ROUND_RESULT_DISPLAY = 5.0

ROUND2_POLICIES = ('stick', 'redeal')
