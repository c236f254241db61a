"""Game domain services: rule engines, bots and the advancement scheduler.

Every engine here is pure: state in, state out, no store or socket access.
HTTP routes and socket handlers reach them through the registry, and only the
services layer persists their results.
"""
