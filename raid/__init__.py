"""
BaseRaid
EMP resolution core for a turn-simulated base raid.

Features:
- Attack-type catalog loaded from JSON
- Time-keyed EMP registry compiled from attacker paths
- Per-minute circular area-effect resolution
- Event bus for observability and follow-up effects
"""
