"""Test entity classes."""
import pytest

from raid.core.entities import Attacker, Defender, PathWaypoint
from raid.core.errors import UnknownPathError


class TestAttacker:
    """Tests for Attacker movement, planting and damage."""

    def test_attacker_creation(self, make_attacker):
        attacker = make_attacker(1, [(1, 0, 5), (2, 1, 5)])
        assert attacker.id == 1
        assert attacker.pos == (0, 5)
        assert attacker.alive
        assert attacker.hp == attacker.max_hp == 100
        assert [s.attacker_path.id for s in attacker.path_in_current_frame] == [1]

    def test_attacker_needs_a_path(self):
        with pytest.raises(ValueError):
            Attacker(1, [])

    def test_advance_records_frame_trace(self, make_attacker):
        attacker = make_attacker(1, [(1, 0, 0), (2, 1, 0), (3, 2, 0), (4, 3, 0)], speed=2)
        attacker.advance()
        assert attacker.pos == (2, 0)
        assert [s.attacker_path.pos for s in attacker.path_in_current_frame] == [(0, 0), (1, 0), (2, 0)]
        attacker.advance()
        assert [s.attacker_path.pos for s in attacker.path_in_current_frame] == [(2, 0), (3, 0)]
        assert attacker.finished

    def test_advance_plants_emp_waypoints(self, make_attacker):
        attacker = make_attacker(1, [(1, 0, 0), (2, 1, 0, 1, 4), (3, 2, 0)], speed=1)
        assert not attacker.is_planted(2)
        planted = attacker.advance()
        assert [w.id for w in planted] == [2]
        assert attacker.is_planted(2)
        # Planting happens once
        assert attacker.advance() == []

    def test_emp_on_first_waypoint_is_planted_immediately(self, make_attacker):
        attacker = make_attacker(1, [(5, 2, 2, 1, 3)])
        assert attacker.is_planted(5)

    def test_is_planted_unknown_path(self, make_attacker):
        attacker = make_attacker(7, [(1, 0, 0)])
        with pytest.raises(UnknownPathError) as exc_info:
            attacker.is_planted(99)
        assert exc_info.value.attacker_id == 7
        assert exc_info.value.path_id == 99

    def test_get_damage_applies_from_position_onwards(self, make_attacker):
        attacker = make_attacker(1, [(1, 0, 0), (2, 1, 0), (3, 2, 0)], speed=2)
        attacker.advance()
        attacker.get_damage(30, 1)
        healths = [s.attacker_health for s in attacker.path_in_current_frame]
        assert healths == [100, 70, 70]
        assert attacker.hp == 70

    def test_get_damage_kills(self, make_attacker):
        attacker = make_attacker(1, [(1, 0, 0), (2, 1, 0)], hp=40)
        attacker.get_damage(50, 0)
        assert attacker.hp == 0
        assert not attacker.alive
        assert attacker.path_in_current_frame[0].attacker_health == 0

    def test_dead_attacker_stops_moving(self, make_attacker):
        attacker = make_attacker(1, [(1, 0, 0), (2, 1, 0), (3, 2, 0)], hp=10)
        attacker.get_damage(10, 0)
        assert attacker.advance() == []
        assert attacker.pos == (0, 0)
        assert attacker.path_in_current_frame == []


class TestDefender:
    """Tests for Defender."""

    def test_defender_disable(self):
        defender = Defender(1, (3, 4))
        assert defender.alive
        assert defender.disable()
        assert not defender.alive
        assert not defender.disable()

    def test_defender_kind(self):
        assert Defender(1, (0, 0)).kind == "Defender"


class TestPathWaypoint:
    """Tests for PathWaypoint."""

    def test_defaults(self):
        waypoint = PathWaypoint(1, 2, 3)
        assert waypoint.pos == (2, 3)
        assert not waypoint.is_emp
        assert waypoint.emp_type is None
        assert waypoint.emp_time is None
