from gamenight import db
from flask_login import UserMixin
import json
import time


class Room(db.Model):
    """One game session. The aggregate lives in ``data`` as JSON; ``version``
    is the compare-and-swap token bumped on every accepted write."""
    __tablename__ = 'rooms'
    code = db.Column(db.String(6), primary_key=True)
    version = db.Column(db.Integer, nullable=False, default=1)
    data = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.Float, nullable=False, default=time.time)
    expires_at = db.Column(db.Float, nullable=False, index=True)

    def to_dict(self):
        return json.loads(self.data)


class PlayerSession(UserMixin, db.Model):
    __tablename__ = 'player_sessions'
    player_id = db.Column(db.String(32), primary_key=True)
    player_name = db.Column(db.String(64), nullable=False)
    room_code = db.Column(db.String(6), nullable=False, index=True)
    joined_at = db.Column(db.Float, nullable=False)
    expires_at = db.Column(db.Float, nullable=False, index=True)

    def get_id(self):
        return self.player_id

    def is_expired(self, now=None):
        return self.expires_at <= (now if now is not None else time.time())

    def to_dict(self):
        return {
            'player_id': self.player_id,
            'player_name': self.player_name,
            'room_code': self.room_code,
            'joined_at': self.joined_at,
        }


class Heartbeat(db.Model):
    __tablename__ = 'heartbeats'
    room_code = db.Column(db.String(6), primary_key=True)
    player_id = db.Column(db.String(32), primary_key=True)
    last_seen = db.Column(db.Float, nullable=False)
    expires_at = db.Column(db.Float, nullable=False, index=True)


class ActionRecord(db.Model):
    """Last idempotency token processed for a (room, player) pair."""
    __tablename__ = 'action_records'
    room_code = db.Column(db.String(6), primary_key=True)
    player_id = db.Column(db.String(32), primary_key=True)
    action_id = db.Column(db.String(128), nullable=False)
    expires_at = db.Column(db.Float, nullable=False, index=True)
