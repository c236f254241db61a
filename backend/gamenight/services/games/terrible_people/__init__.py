from gamenight.errors import GameError
from ..base import GameModule, Advancement, Events, deadline_passed, find_player, is_bot, unchanged_since
from . import engine, bots


class TerriblePeopleModule(GameModule):
    game_id = 'terrible-people'
    name = 'Terrible People'
    min_players = 4
    max_players = 4

    def default_settings(self, players, config=None):
        return {'target_score': engine.DEFAULT_TARGET_SCORE}

    def initialize(self, players, settings, now, rng):
        return engine.initialize_game(players, settings, now, rng)

    def process_action(self, state, player_id, action, players, now, rng):
        return engine.process_action(state, player_id, action, players, now, rng)

    def sanitize_for_player(self, state, player_id):
        return engine.sanitize(state, player_id)

    def player_scores(self, state):
        return dict(state['scores'])

    def get_bot_action(self, state, bot_id, players, rng):
        if state['phase'] == 'submitting' and bot_id != engine.czar_id(state) \
                and bot_id not in state['submissions']:
            hand = state['hands'].get(bot_id) or []
            if hand:
                card_ids = bots.select_random_cards(hand, state['black_card']['pick'], rng)
                return {'type': 'submit', 'payload': {'card_ids': card_ids}}
        if state['phase'] == 'judging' and bot_id == engine.czar_id(state) \
                and state['round_winner_id'] is None and state['reveal_order']:
            return {'type': 'judge',
                    'payload': {'winner_id': bots.select_random_winner(state['reveal_order'], rng)}}
        return None

    def process_advancement(self, state, players, now, rng):
        phase = state['phase']
        if phase == 'czar_reveal' and deadline_passed(state.get('phase_ends_at'), now):
            new = engine.start_submitting(state, players, now, rng)
            return Advancement(new, Events().to_room('phase-changed', self._phase_payload(new)),
                               unchanged_since(state))

        if phase == 'round_result' and deadline_passed(state.get('phase_ends_at'), now):
            new = engine.advance_round(state, now, rng)
            events = Events().to_room('phase-changed', self._phase_payload(new))
            events.extend(self.private_updates(new, players))
            return Advancement(new, events, unchanged_since(state))

        if not deadline_passed(state.get('bot_action_at'), now):
            return None

        if phase == 'submitting':
            current = state
            events = Events()
            for pid in state['seats']:
                if not is_bot(players, pid):
                    continue
                action = self.get_bot_action(current, pid, players, rng)
                if action is None:
                    continue
                new = engine.process_action(current, pid, action, players, now, rng)
                events.extend(self.describe_action(current, new, pid, action, players))
                current = new
            if current is state:
                return None
            if current['phase'] == 'submitting' and current['bot_action_at'] is not None:
                current = dict(current)
                current['bot_action_at'] = None
            return Advancement(current, events, unchanged_since(state))

        if phase == 'judging':
            czar = engine.czar_id(state)
            if is_bot(players, czar):
                return self.run_bot(state, czar, players, now, rng)
        return None

    def process_player_replacement(self, state, departing_id, bot_id, seat_index, players, now, rng):
        return engine.replace_player(state, departing_id, bot_id, players, now, rng)

    def process_lobby_action(self, settings, players, action):
        if action.get('type') == 'set-target-score':
            try:
                target = int((action.get('payload') or {}).get('target_score'))
            except (TypeError, ValueError):
                target = 0
            if not 3 <= target <= 15:
                raise GameError('Target score must be between 3 and 15', 'INVALID_SETTING')
            new = dict(settings)
            new['target_score'] = target
            return new, Events().to_room('settings-updated', {'target_score': target})
        return super().process_lobby_action(settings, players, action)

    def play_again(self, state, players, settings, now, rng):
        if state['phase'] != 'game_over':
            return None
        return engine.initialize_game(players, settings, now, rng)

    def private_updates(self, state, players):
        events = Events()
        for p in players:
            if not p['is_bot'] and p['id'] in state['hands']:
                events.to_player(p['id'], 'hand-updated', {'hand': state['hands'][p['id']]})
        return events

    def _phase_payload(self, state):
        return {
            'phase': state['phase'],
            'black_card': state['black_card'],
            'czar_id': engine.czar_id(state),
            'czar_index': state['czar_index'],
            'current_round': state['current_round'],
            'phase_ends_at': state['phase_ends_at'],
        }

    def describe_action(self, before, after, player_id, action, players):
        events = Events()
        kind = action.get('type')
        if kind == 'submit':
            events.to_room('player-submitted', {'player_id': player_id})
            if not is_bot(players, player_id):
                events.to_player(player_id, 'hand-updated', {'hand': after['hands'][player_id]})
            if after['phase'] == 'judging':
                events.to_room('phase-changed', self._phase_payload(after))
                events.to_room('submissions-revealed', {
                    'submissions': [
                        {'id': pid, 'cards': after['submissions'][pid]}
                        for pid in after['reveal_order']
                    ],
                })
            return events

        if kind == 'judge':
            winner_id = after['round_winner_id']
            winner = find_player(players, winner_id)
            winner_name = winner['name'] if winner else None
            game_over = after['phase'] == 'game_over'
            events.to_room('round-result', {
                'winner_id': winner_id,
                'winner_name': winner_name,
                'submission': after['submissions'][winner_id],
                'scores': after['scores'],
                'is_game_over': game_over,
            })
            if game_over:
                events.to_room('game-over', {
                    'final_scores': after['scores'],
                    'winner_id': winner_id,
                    'winner_name': winner_name,
                })
        return events


module = TerriblePeopleModule()
