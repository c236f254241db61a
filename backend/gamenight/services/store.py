"""Room store over SQL rows with compare-and-swap writes.

Every mutation of a room goes through ``atomic_room_update``. Sessions,
heartbeats and action ids are independent keyed rows with their own TTLs.
"""

import json
import time
from typing import Callable, Optional

from flask import current_app

from gamenight import db
from gamenight.models import Room, PlayerSession, Heartbeat, ActionRecord


Mutator = Callable[[dict], Optional[dict]]


def _ttl(name: str, default: int) -> int:
    return int(current_app.config.get(name, default))


def _encode(room: dict) -> str:
    return json.dumps(room, separators=(',', ':'))


# ---- Rooms ----

def create_room(room: dict) -> dict:
    now = time.time()
    row = Room(
        code=room['room_code'],
        version=1,
        data=_encode(room),
        created_at=now,
        expires_at=now + _ttl('ROOM_TTL_SEC', 7200),
    )
    db.session.add(row)
    db.session.commit()
    return room


def _load(room_code: str):
    """Return ``(version, data)`` for a live room without touching the identity map."""
    row = (
        db.session.query(Room.version, Room.data, Room.expires_at)
        .filter(Room.code == room_code)
        .first()
    )
    if row is None:
        return None
    if row.expires_at <= time.time():
        delete_room(room_code)
        return None
    return row.version, row.data


def get_room(room_code: str) -> Optional[dict]:
    loaded = _load(room_code)
    if loaded is None:
        return None
    return json.loads(loaded[1])


def room_exists(room_code: str) -> bool:
    return _load(room_code) is not None


def list_room_codes() -> list:
    now = time.time()
    return [code for (code,) in db.session.query(Room.code).filter(Room.expires_at > now)]


def delete_room(room_code: str) -> None:
    Room.query.filter_by(code=room_code).delete(synchronize_session=False)
    db.session.commit()


def refresh_room_ttl(room_code: str) -> None:
    Room.query.filter_by(code=room_code).update(
        {'expires_at': time.time() + _ttl('ROOM_TTL_SEC', 7200)},
        synchronize_session=False,
    )
    db.session.commit()


def atomic_room_update(room_code: str, mutator: Mutator) -> Optional[dict]:
    """Apply ``mutator`` to the current room and write it back only if no
    other writer got in first.

    The mutator receives a freshly decoded dict. It returns ``None`` to reject
    (the call returns ``None``), the very same dict to signal an already
    applied no-op (returned without a write), or a new dict to store.
    Returns the stored room, or ``None`` on rejection or a lost race.
    """
    loaded = _load(room_code)
    if loaded is None:
        return None
    version, data = loaded
    current = json.loads(data)

    updated = mutator(current)
    if updated is None:
        return None
    if updated is current:
        return current

    matched = Room.query.filter_by(code=room_code, version=version).update(
        {
            'data': _encode(updated),
            'version': version + 1,
            'expires_at': time.time() + _ttl('ROOM_TTL_SEC', 7200),
        },
        synchronize_session=False,
    )
    if matched != 1:
        db.session.rollback()
        current_app.logger.info(f"[cas-conflict] room={room_code} version={version}")
        return None
    db.session.commit()
    return updated


# ---- Sessions ----

def create_session(player_id: str, player_name: str, room_code: str) -> PlayerSession:
    now = time.time()
    session = db.session.get(PlayerSession, player_id)
    if session is None:
        session = PlayerSession(player_id=player_id)
    session.player_name = player_name
    session.room_code = room_code
    session.joined_at = now
    session.expires_at = now + _ttl('SESSION_TTL_SEC', 7200)
    db.session.add(session)
    db.session.commit()
    return session


def get_session(player_id: str) -> Optional[PlayerSession]:
    session = db.session.get(PlayerSession, player_id)
    if session is None or session.is_expired():
        return None
    return session


def delete_session(player_id: str) -> None:
    PlayerSession.query.filter_by(player_id=player_id).delete(synchronize_session=False)
    db.session.commit()


# ---- Heartbeats ----

def set_heartbeat(room_code: str, player_id: str, now: Optional[float] = None) -> float:
    now = time.time() if now is None else now
    hb = db.session.get(Heartbeat, (room_code, player_id))
    if hb is None:
        hb = Heartbeat(room_code=room_code, player_id=player_id)
    hb.last_seen = now
    hb.expires_at = time.time() + _ttl('HEARTBEAT_TTL_SEC', 300)
    db.session.add(hb)
    db.session.commit()
    return now


def get_heartbeat(room_code: str, player_id: str) -> Optional[float]:
    hb = db.session.get(Heartbeat, (room_code, player_id))
    if hb is None or hb.expires_at <= time.time():
        return None
    return hb.last_seen


def delete_heartbeat(room_code: str, player_id: str) -> None:
    Heartbeat.query.filter_by(room_code=room_code, player_id=player_id).delete(synchronize_session=False)
    db.session.commit()


# ---- Action ids ----

def get_last_action_id(room_code: str, player_id: str) -> Optional[str]:
    rec = db.session.get(ActionRecord, (room_code, player_id))
    if rec is None or rec.expires_at <= time.time():
        return None
    return rec.action_id


def record_action_id(room_code: str, player_id: str, action_id: str) -> None:
    rec = db.session.get(ActionRecord, (room_code, player_id))
    if rec is None:
        rec = ActionRecord(room_code=room_code, player_id=player_id)
    rec.action_id = action_id
    rec.expires_at = time.time() + _ttl('ACTION_ID_TTL_SEC', 3600)
    db.session.add(rec)
    db.session.commit()


def delete_action_records(room_code: str) -> None:
    ActionRecord.query.filter_by(room_code=room_code).delete(synchronize_session=False)
    db.session.commit()


def purge_expired(now: float) -> dict:
    counts = {}
    for name, model in (('rooms', Room), ('sessions', PlayerSession),
                        ('heartbeats', Heartbeat), ('action_ids', ActionRecord)):
        counts[name] = model.query.filter(model.expires_at <= now).delete(synchronize_session=False)
    db.session.commit()
    return counts
