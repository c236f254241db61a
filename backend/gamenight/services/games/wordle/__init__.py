from ..base import GameModule, Events
from . import engine


class WordleModule(GameModule):
    game_id = 'wordle'
    name = 'Daily Pearl'
    min_players = 1
    max_players = 1
    restart_in_place = False

    def initialize(self, players, settings, now, rng):
        return engine.initialize_game(now)

    def process_action(self, state, player_id, action, players, now, rng):
        if action.get('type') != 'guess':
            return state
        return engine.submit_guess(state, (action.get('payload') or {}).get('word'), now)

    def sanitize_for_player(self, state, player_id):
        return engine.sanitize(state)

    def check_game_over(self, state):
        return state['phase'] in ('won', 'lost')

    def play_again(self, state, players, settings, now, rng):
        return None

    def describe_action(self, before, after, player_id, action, players):
        latest = after['guesses'][-1]
        events = Events().to_room('guess-evaluated', {
            'player_id': player_id,
            'guess_number': len(after['guesses']),
            'result': latest['result'],
        })
        if after['phase'] != 'playing':
            events.to_room('game-over', {
                'result': after['phase'],
                'target_word': after['target_word'],
                'guesses': len(after['guesses']),
            })
        return events


module = WordleModule()
