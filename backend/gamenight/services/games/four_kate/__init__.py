from ..base import GameModule, Events, deadline_passed, is_bot
from . import engine, bots


class FourKateModule(GameModule):
    game_id = '4-kate'
    name = '4 Kate'
    min_players = 2
    max_players = 2

    def initialize(self, players, settings, now, rng):
        return engine.initialize_game(players, now)

    def process_action(self, state, player_id, action, players, now, rng):
        if action.get('type') != 'drop':
            return state
        column = (action.get('payload') or {}).get('column')
        return engine.drop(state, player_id, column, players, now)

    def get_bot_action(self, state, bot_id, players, rng):
        if state['phase'] != 'playing' or state['players'][state['current_turn']] != bot_id:
            return None
        column = bots.choose_column(state['board'], state['current_turn'], rng)
        return {'type': 'drop', 'payload': {'column': column}}

    def process_advancement(self, state, players, now, rng):
        if state['phase'] != 'playing' or not deadline_passed(state.get('bot_action_at'), now):
            return None
        on_turn = state['players'][state['current_turn']]
        if not is_bot(players, on_turn):
            return None
        return self.run_bot(state, on_turn, players, now, rng)

    def process_player_replacement(self, state, departing_id, bot_id, seat_index, players, now, rng):
        return engine.replace_player(state, departing_id, bot_id, players, now)

    def play_again(self, state, players, settings, now, rng):
        if state['phase'] != 'game_over':
            return None
        return engine.initialize_game(players, now, state['games_played'] + 1, state['players'])

    def describe_action(self, before, after, player_id, action, players):
        events = Events()
        if not after['moves'] or len(after['moves']) == len(before['moves']):
            return events
        last = after['moves'][-1]
        events.to_room('move-made', {
            'column': last['col'],
            'row': last['row'],
            'color': last['color'],
            'current_turn': after['current_turn'],
            'board': after['board'],
        })
        if after['phase'] == 'game_over':
            events.to_room('game-over', {
                'winner': after['winner'],
                'winning_cells': after['winning_cells'],
                'final_board': after['board'],
                'is_draw': after['is_draw'],
            })
        return events


module = FourKateModule()
