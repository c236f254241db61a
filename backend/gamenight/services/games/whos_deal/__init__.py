from gamenight.errors import GameError
from ..base import GameModule, Advancement, Events, deadline_passed, is_bot, unchanged_since
from . import engine, bots
from .constants import ALLOWED_TARGET_SCORES, DEFAULT_TARGET_SCORE, ROUND2_POLICIES


class WhosDealModule(GameModule):
    game_id = 'whos-deal'
    name = "Who's Deal"
    min_players = 4
    max_players = 4

    def default_settings(self, players, config=None):
        policy = (config or {}).get('ROUND2_ALL_PASS_POLICY', 'stick')
        ids = [p['id'] for p in players]
        return {
            'target_score': DEFAULT_TARGET_SCORE,
            'teams': {'a': [ids[0], ids[2]], 'b': [ids[1], ids[3]]},
            'round2_all_pass': policy if policy in ROUND2_POLICIES else 'stick',
        }

    def initialize(self, players, settings, now, rng):
        return engine.initialize_game(players, settings, now, rng)

    def process_action(self, state, player_id, action, players, now, rng):
        return engine.process_action(state, player_id, action, players, now, rng)

    def sanitize_for_player(self, state, player_id):
        return engine.sanitize(state, player_id)

    def get_bot_action(self, state, bot_id, players, rng):
        return bots.choose_bot_action(state, bot_id)

    def process_advancement(self, state, players, now, rng):
        r = state.get('round')
        if not r or state['phase'] == 'game_over':
            return None
        if r['trump_phase'] == 'round_over':
            if not deadline_passed(state.get('phase_ends_at'), now):
                return None
            new = engine.advance_to_next_round(state, players, now, rng)
            events = self._new_round_events(new, players)
            return Advancement(new, events, unchanged_since(state))
        if deadline_passed(state.get('bot_action_at'), now):
            on_turn = state['seats'][r['current_turn_seat_index']]
            if is_bot(players, on_turn):
                return self.run_bot(state, on_turn, players, now, rng)
        return None

    def process_player_replacement(self, state, departing_id, bot_id, seat_index, players, now, rng):
        return engine.replace_player(state, departing_id, bot_id, players, now, rng)

    def replace_in_settings(self, settings, departing_id, bot_id):
        teams = settings.get('teams')
        if not teams:
            return settings
        new = dict(settings)
        new['teams'] = {
            side: [bot_id if pid == departing_id else pid for pid in ids]
            for side, ids in teams.items()
        }
        return new

    def process_lobby_action(self, settings, players, action):
        kind = action.get('type')
        payload = action.get('payload') or {}
        if kind == 'swap-teams':
            a_id = payload.get('player_id_a')
            b_id = payload.get('player_id_b')
            teams = settings.get('teams') or {'a': [], 'b': []}
            if a_id in teams['a'] and b_id in teams['b']:
                pass
            elif a_id in teams['b'] and b_id in teams['a']:
                a_id, b_id = b_id, a_id
            else:
                raise GameError('Players must be on opposite teams', 'INVALID_SWAP')
            new_teams = {
                'a': [b_id if pid == a_id else pid for pid in teams['a']],
                'b': [a_id if pid == b_id else pid for pid in teams['b']],
            }
            new = dict(settings)
            new['teams'] = new_teams
            return new, Events().to_room('teams-updated', {'teams': new_teams})
        if kind == 'set-target-score':
            try:
                target = int(payload.get('target_score'))
            except (TypeError, ValueError):
                target = None
            if target not in ALLOWED_TARGET_SCORES:
                raise GameError(f'Target score must be one of {list(ALLOWED_TARGET_SCORES)}', 'INVALID_SETTING')
            new = dict(settings)
            new['target_score'] = target
            return new, Events().to_room('settings-updated', {'target_score': target})
        return super().process_lobby_action(settings, players, action)

    def play_again(self, state, players, settings, now, rng):
        return engine.restart(state, players, now, rng)

    def private_updates(self, state, players):
        events = Events()
        r = state.get('round')
        if not r:
            return events
        for p in players:
            if not p['is_bot'] and p['id'] in r['hands']:
                events.to_player(p['id'], 'hand-updated', {'hand': r['hands'][p['id']]})
        return events

    def player_scores(self, state):
        # partners share their team's score
        return {
            pid: team['score']
            for team in state['teams'].values()
            for pid in team['player_ids']
        }

    def _new_round_events(self, state, players):
        r = state['round']
        events = Events().to_room('new-round', {
            'dealer_seat_index': state['dealer_seat_index'],
            'face_up_card': r['face_up_card'],
        })
        return events.extend(self.private_updates(state, players))

    def describe_action(self, before, after, player_id, action, players):
        events = Events()
        kind = action.get('type')
        seat = after['seats'].index(player_id) if player_id in after['seats'] else -1
        prev = before['round']
        r = after['round']

        if kind in ('call-trump', 'pass-trump'):
            if after['dealer_seat_index'] != before['dealer_seat_index']:
                # everyone passed twice and the hand was thrown in
                events.to_room('trump-action', {'action': 'pass', 'seat_index': seat})
                return events.extend(self._new_round_events(after, players))
            if kind == 'pass-trump':
                return events.to_room('trump-action', {'action': 'pass', 'seat_index': seat})
            called = 'order-up' if prev['trump_phase'] == 'round1' else 'call'
            events.to_room('trump-action', {
                'action': called,
                'seat_index': seat,
                'suit': r['trump_suit'],
                'go_alone': r['going_alone'],
            })
            events.to_room('trump-confirmed', {
                'trump_suit': r['trump_suit'],
                'calling_player': r['calling_player_id'],
                'calling_team': r['calling_team'],
                'go_alone': r['going_alone'],
            })
            if r['trump_phase'] == 'dealer_discard':
                dealer_id = after['seats'][after['dealer_seat_index']]
                if not is_bot(players, dealer_id):
                    events.to_player(dealer_id, 'hand-updated', {'hand': r['hands'][dealer_id]})
            else:
                events.to_room('trick-started', {'lead_seat_index': r['trick_lead_seat_index']})
            return events

        if kind == 'discard':
            events.to_room('dealer-discarded', {'seat_index': seat})
            if not is_bot(players, player_id):
                events.to_player(player_id, 'hand-updated', {'hand': r['hands'][player_id]})
            return events.to_room('trick-started', {'lead_seat_index': r['trick_lead_seat_index']})

        if kind == 'play-card':
            card_id = (action.get('payload') or {}).get('card_id')
            card = next(c for c in prev['hands'][player_id] if c['id'] == card_id)
            events.to_room('card-played', {'seat_index': seat, 'card': card})
            if r['tricks_played'] == prev['tricks_played']:
                return events
            last = r['last_trick']
            events.to_room('trick-won', {
                'winning_seat_index': last['winning_seat_index'],
                'winning_team': last['winning_team'],
                'tricks_won': r['tricks_won'],
            })
            if r['trump_phase'] != 'round_over':
                return events.to_room('trick-started', {'lead_seat_index': r['trick_lead_seat_index']})
            scores = {'a': after['teams']['a']['score'], 'b': after['teams']['b']['score']}
            events.to_room('round-over', {
                'calling_team': r['calling_team'],
                'tricks_won': r['tricks_won'],
                'points_awarded': r['points_awarded'],
                'scores': scores,
                'is_game_over': after['phase'] == 'game_over',
            })
            if after['phase'] == 'game_over':
                events.to_room('game-over', {'winning_team': after['winning_team'], 'final_scores': scores})
        return events


module = WhosDealModule()
