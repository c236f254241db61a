"""Daily Pearl: a five-letter word guess with one shared answer per time slot.

Slots turn over at 04:15 and 16:15 local time. Guesses before 04:15 still
belong to the previous day's evening slot.
"""

from datetime import datetime, timedelta
from typing import Dict, List

from gamenight.errors import GameError
from ..base import clone
from .words import ANSWER_WORDS, is_valid_guess

WORD_LENGTH = 5
MAX_GUESSES = 6
MORNING_BOUNDARY = 4 * 60 + 15
EVENING_BOUNDARY = 16 * 60 + 15

# keyboard letters only move up this ladder
LETTER_RANK = {'absent': 0, 'present': 1, 'correct': 2}


def slot_id_for(moment: datetime) -> str:
    minutes = moment.hour * 60 + moment.minute
    if minutes < MORNING_BOUNDARY:
        day, slot = (moment - timedelta(days=1)).date(), 1
    elif minutes < EVENING_BOUNDARY:
        day, slot = moment.date(), 0
    else:
        day, slot = moment.date(), 1
    return f'{day.year}-{day.month}-{day.day}-{slot}'


def slot_id_at(now: float) -> str:
    return slot_id_for(datetime.fromtimestamp(now))


def string_hash(text: str) -> int:
    """32-bit ``h * 31 + c`` hash, absolute value."""
    h = 0
    for ch in text:
        h = (h * 31 + ord(ch)) & 0xFFFFFFFF
    if h >= 0x80000000:
        h -= 0x100000000
    return abs(h)


def daily_word(slot_id: str) -> str:
    return ANSWER_WORDS[string_hash(slot_id) % len(ANSWER_WORDS)]


def evaluate_guess(guess: str, target: str) -> List[Dict[str, str]]:
    result = [{'letter': ch, 'state': 'absent'} for ch in guess]
    remaining: Dict[str, int] = {}
    for ch in target:
        remaining[ch] = remaining.get(ch, 0) + 1

    for i, ch in enumerate(guess):
        if ch == target[i]:
            result[i]['state'] = 'correct'
            remaining[ch] -= 1

    for i, ch in enumerate(guess):
        if result[i]['state'] == 'correct':
            continue
        if remaining.get(ch, 0) > 0:
            result[i]['state'] = 'present'
            remaining[ch] -= 1
    return result


def initialize_game(now: float) -> dict:
    slot = slot_id_at(now)
    return {
        'phase': 'playing',
        'slot_id': slot,
        'target_word': daily_word(slot),
        'guesses': [],
        'keyboard': {},
        'started_at': now,
        'completed_at': None,
    }


def submit_guess(state: dict, word, now: float) -> dict:
    if state['phase'] != 'playing':
        raise GameError('This puzzle is finished', 'INVALID_PHASE')
    word = word.strip().lower() if isinstance(word, str) else ''
    if len(word) != WORD_LENGTH or not word.isalpha():
        raise GameError(f'Guesses must be {WORD_LENGTH} letters', 'INVALID_SUBMISSION')
    if not is_valid_guess(word):
        raise GameError('Not in word list', 'INVALID_SUBMISSION')

    new = clone(state)
    letters = evaluate_guess(word, new['target_word'])
    new['guesses'].append({'word': word, 'result': letters})
    for entry in letters:
        known = new['keyboard'].get(entry['letter'])
        if known is None or LETTER_RANK[entry['state']] > LETTER_RANK[known]:
            new['keyboard'][entry['letter']] = entry['state']

    if word == new['target_word']:
        new['phase'] = 'won'
    elif len(new['guesses']) >= MAX_GUESSES:
        new['phase'] = 'lost'
    if new['phase'] != 'playing':
        new['completed_at'] = now
    return new


def sanitize(state: dict) -> dict:
    view = clone(state)
    if view['phase'] == 'playing':
        view['target_word'] = None
    view['guesses_remaining'] = MAX_GUESSES - len(view['guesses'])
    return view
