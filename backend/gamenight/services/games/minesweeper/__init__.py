from gamenight.errors import GameError
from ..base import GameModule, Events
from . import engine


class MinesweeperModule(GameModule):
    game_id = 'minesweeper'
    name = 'Minesweeper'
    min_players = 1
    max_players = 1
    restart_in_place = False

    def default_settings(self, players, config=None):
        return {
            'difficulty': engine.DEFAULT_DIFFICULTY,
            'rows': engine.DEFAULT_ROWS,
            'cols': engine.DEFAULT_COLS,
        }

    def initialize(self, players, settings, now, rng):
        return engine.initialize_game(settings, now)

    def process_action(self, state, player_id, action, players, now, rng):
        return engine.process_action(state, action, now, rng)

    def sanitize_for_player(self, state, player_id):
        return engine.sanitize(state)

    def check_game_over(self, state):
        return state['phase'] in ('won', 'lost')

    def process_lobby_action(self, settings, players, action):
        if action.get('type') != 'update-settings':
            return super().process_lobby_action(settings, players, action)
        payload = action.get('payload') or {}
        difficulty = payload.get('difficulty', settings.get('difficulty'))
        rows = payload.get('rows', settings.get('rows'))
        cols = payload.get('cols', settings.get('cols'))
        if not isinstance(difficulty, str) or difficulty not in engine.MINE_DENSITY:
            raise GameError(f'Unknown difficulty: {difficulty}', 'INVALID_SETTING')
        if not isinstance(rows, int) or not engine.MIN_ROWS <= rows <= engine.MAX_ROWS:
            raise GameError(f'Rows must be {engine.MIN_ROWS}-{engine.MAX_ROWS}', 'INVALID_SETTING')
        if not isinstance(cols, int) or not engine.MIN_COLS <= cols <= engine.MAX_COLS:
            raise GameError(f'Columns must be {engine.MIN_COLS}-{engine.MAX_COLS}', 'INVALID_SETTING')
        changed = {'difficulty': difficulty, 'rows': rows, 'cols': cols}
        new = dict(settings)
        new.update(changed)
        return new, Events().to_room('settings-updated', changed)

    def play_again(self, state, players, settings, now, rng):
        return None

    def describe_action(self, before, after, player_id, action, players):
        events = Events().to_player(player_id, 'board-updated', {'board': engine.sanitize(after)})
        if after['phase'] in ('won', 'lost'):
            events.to_room('game-over', {
                'result': after['phase'],
                'elapsed': after['ended_at'] - after['started_at'],
                'triggered_mine_index': after['triggered_mine_index'],
            })
        return events


module = MinesweeperModule()
