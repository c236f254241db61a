DEFAULT_GRID_SIZE = 10
DEFAULT_SHIP_SET = 'classic'

SHIP_SETS = {
    'classic': [
        {'id': 'carrier', 'name': 'Carrier', 'size': 5},
        {'id': 'battleship', 'name': 'Battleship', 'size': 4},
        {'id': 'cruiser', 'name': 'Cruiser', 'size': 3},
        {'id': 'submarine', 'name': 'Submarine', 'size': 3},
        {'id': 'destroyer', 'name': 'Destroyer', 'size': 2},
    ],
    'quick': [
        {'id': 'battleship', 'name': 'Battleship', 'size': 4},
        {'id': 'cruiser', 'name': 'Cruiser', 'size': 3},
        {'id': 'submarine', 'name': 'Submarine', 'size': 3},
        {'id': 'destroyer', 'name': 'Destroyer', 'size': 2},
    ],
    'blitz': [
        {'id': 'cruiser', 'name': 'Cruiser', 'size': 3},
        {'id': 'submarine', 'name': 'Submarine', 'size': 2},
        {'id': 'destroyer', 'name': 'Destroyer', 'size': 2},
    ],
}

VALID_COMBOS = {
    10: ('classic', 'quick', 'blitz'),
    8: ('classic', 'quick', 'blitz'),
    7: ('quick', 'blitz'),
}

# Seconds
BOT_SETUP_DELAY = (1.0, 2.0)
BOT_SHOT_DELAY = (1.5, 3.0)

# Attempts per ship before a bot restarts its whole layout
PLACEMENT_ATTEMPTS = 200
