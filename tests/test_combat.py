"""Tests for the two-phase combat machine."""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import random
import pytest

from shared.constants import Role, CombatPhase
from shared.errors import ValidationError
from server.combat import CombatMachine, roll_combat

A, B = Role.PLAYER_A, Role.PLAYER_B


class FixedDice:
    """Stands in for random.Random; hands out predetermined die values."""

    def __init__(self, *dice):
        self.dice = list(dice)

    def randint(self, a, b):
        return self.dice.pop(0)


class TestRollCombat:
    def test_higher_attacker_wins(self):
        c = roll_combat(A, B, FixedDice(4, 2))
        assert c.winner == A
        assert c.loser == B
        assert c.damage == 2

    def test_higher_defender_wins(self):
        c = roll_combat(A, B, FixedDice(1, 6))
        assert c.winner == B
        assert c.loser == A
        assert c.damage == 5

    def test_tie_goes_to_attacker_for_one_damage(self):
        c = roll_combat(B, A, FixedDice(3, 3))
        assert c.winner == B
        assert c.loser == A
        assert c.damage == 1

    def test_dice_in_range(self):
        rng = random.Random(42)
        for _ in range(200):
            c = roll_combat(A, B, rng)
            assert 1 <= c.attacker_roll <= 6
            assert 1 <= c.defender_roll <= 6
            assert c.damage >= 1

    def test_nothing_revealed_initially(self):
        c = roll_combat(A, B, FixedDice(5, 2))
        payload = c.reveal_payload()
        assert payload == {
            "attacker": "player_a",
            "defender": "player_b",
            "attacker_rolled": False,
            "defender_rolled": False,
        }


class TestCombatMachine:
    def test_starts_idle(self):
        m = CombatMachine()
        assert m.phase == CombatPhase.IDLE
        assert m.active is False
        assert m.to_state() is None

    def test_full_cycle(self):
        m = CombatMachine()
        m.begin(A, B, FixedDice(4, 2))
        assert m.phase == CombatPhase.AWAITING_ATTACKER_ROLL

        revealed, resolved = m.reveal(A)
        assert revealed is True
        assert resolved is None
        assert m.phase == CombatPhase.AWAITING_DEFENDER_ROLL

        revealed, resolved = m.reveal(B)
        assert revealed is True
        assert resolved.attacker_roll == 4
        assert resolved.defender_roll == 2
        assert resolved.attacker_rolled and resolved.defender_rolled
        assert m.phase == CombatPhase.IDLE
        assert m.pending is None

    def test_second_begin_rejected(self):
        m = CombatMachine()
        m.begin(A, B, FixedDice(4, 2))
        with pytest.raises(ValidationError):
            m.begin(A, B, FixedDice(1, 1))
        assert m.pending.attacker_roll == 4

    def test_defender_cannot_roll_first(self):
        m = CombatMachine()
        m.begin(A, B, FixedDice(4, 2))
        with pytest.raises(ValidationError, match="attacker must roll first"):
            m.reveal(B)
        assert m.phase == CombatPhase.AWAITING_ATTACKER_ROLL
        assert m.pending.defender_rolled is False

    def test_duplicate_attacker_roll_is_noop(self):
        m = CombatMachine()
        m.begin(A, B, FixedDice(4, 2))
        m.reveal(A)
        assert m.reveal(A) == (False, None)
        assert m.phase == CombatPhase.AWAITING_DEFENDER_ROLL

    def test_spectator_cannot_roll(self):
        m = CombatMachine()
        m.begin(A, B, FixedDice(4, 2))
        with pytest.raises(ValidationError):
            m.reveal(Role.SPECTATOR)

    def test_roll_without_combat(self):
        with pytest.raises(ValidationError, match="No combat"):
            CombatMachine().reveal(A)

    def test_public_state_hides_dice(self):
        m = CombatMachine()
        m.begin(B, A, FixedDice(6, 6))
        m.reveal(B)
        state = m.to_state()
        assert state.attacker == B
        assert state.attacker_rolled is True
        assert state.defender_rolled is False
        assert "attacker_roll" not in state.to_dict()
