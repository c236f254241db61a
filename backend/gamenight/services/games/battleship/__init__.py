from gamenight.errors import GameError
from ..base import GameModule, Advancement, Events, deadline_passed, is_bot, unchanged_since
from . import engine, bots
from .constants import DEFAULT_GRID_SIZE, DEFAULT_SHIP_SET, SHIP_SETS


class BattleshipModule(GameModule):
    game_id = 'battleship'
    name = 'Battleship'
    min_players = 2
    max_players = 2

    def default_settings(self, players, config=None):
        return {'grid_size': DEFAULT_GRID_SIZE, 'ship_set': DEFAULT_SHIP_SET}

    def initialize(self, players, settings, now, rng):
        return engine.initialize_game(players, settings, now, rng)

    def process_action(self, state, player_id, action, players, now, rng):
        return engine.process_action(state, player_id, action, players, now, rng)

    def sanitize_for_player(self, state, player_id):
        return engine.sanitize(state, player_id)

    def get_bot_action(self, state, bot_id, players, rng):
        if state['phase'] == 'setup' and bot_id not in state['setup_ready']:
            templates = engine.ship_templates(state['ship_set'])
            return {'type': 'place-ships',
                    'payload': {'ships': bots.place_fleet(state['grid_size'], templates, rng)}}
        if state['phase'] == 'playing' and state['current_turn'] == bot_id:
            target = state['boards'][engine.opponent_of(state, bot_id)]
            row, col = bots.choose_shot(target, state['grid_size'], rng)
            return {'type': 'fire', 'payload': {'row': row, 'col': col}}
        return None

    def process_advancement(self, state, players, now, rng):
        if not deadline_passed(state.get('bot_action_at'), now):
            return None
        if state['phase'] == 'setup':
            current = state
            events = Events()
            for pid in state['turn_order']:
                if not is_bot(players, pid) or pid in current['setup_ready']:
                    continue
                action = self.get_bot_action(current, pid, players, rng)
                new = engine.process_action(current, pid, action, players, now, rng)
                events.extend(self.describe_action(current, new, pid, action, players))
                current = new
            if current is state:
                return None
            return Advancement(current, events, unchanged_since(state))
        if state['phase'] == 'playing' and is_bot(players, state['current_turn']):
            return self.run_bot(state, state['current_turn'], players, now, rng)
        return None

    def process_player_replacement(self, state, departing_id, bot_id, seat_index, players, now, rng):
        return engine.replace_player(state, departing_id, bot_id, players, now, rng)

    def process_lobby_action(self, settings, players, action):
        if action.get('type') != 'update-settings':
            return super().process_lobby_action(settings, players, action)
        payload = action.get('payload') or {}
        grid_size = payload.get('grid_size', settings.get('grid_size'))
        ship_set = payload.get('ship_set', settings.get('ship_set'))
        if not isinstance(ship_set, str) or not isinstance(grid_size, int) \
                or ship_set not in SHIP_SETS or not engine.valid_combo(grid_size, ship_set):
            raise GameError(f'{ship_set} fleet does not fit a {grid_size}x{grid_size} grid',
                            'INVALID_SETTING')
        new = dict(settings)
        new.update({'grid_size': grid_size, 'ship_set': ship_set})
        return new, Events().to_room('settings-updated', {'grid_size': grid_size, 'ship_set': ship_set})

    def play_again(self, state, players, settings, now, rng):
        if state['phase'] != 'game_over':
            return None
        return engine.initialize_game(players, settings, now, rng)

    def private_updates(self, state, players):
        events = Events()
        for pid in state['turn_order']:
            if not is_bot(players, pid):
                events.to_player(pid, 'board-updated', {'board': engine.sanitize(state, pid)})
        return events

    def describe_action(self, before, after, player_id, action, players):
        events = Events()
        if action.get('type') == 'place-ships':
            events.to_room('setup-ready', {
                'player_id': player_id,
                'all_ready': after['phase'] == 'playing',
                'current_turn': after['current_turn'],
            })
            if not is_bot(players, player_id):
                events.to_player(player_id, 'board-updated', {'board': engine.sanitize(after, player_id)})
            return events

        shot = after['last_shot']
        events.to_room('shot-fired', {
            'attacker_id': shot['attacker_id'],
            'row': shot['row'],
            'col': shot['col'],
            'result': shot['result'],
            'next_turn': after['current_turn'],
        })
        if shot['result'] == 'sunk':
            events.to_room('ship-sunk', {
                'owner_id': shot['defender_id'],
                'ship_name': shot['ship_name'],
                'positions': shot['ship_positions'],
            })
        if after['phase'] == 'game_over':
            events.to_room('game-over', {
                'winner': after['winner'],
                'boards': {pid: after['boards'][pid]['ships'] for pid in after['turn_order']},
            })
        return events.extend(self.private_updates(after, players))


module = BattleshipModule()
