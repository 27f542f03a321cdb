from __future__ import annotations
from datetime import datetime, timezone
import pytest
from dailyguess.models.challenge import Challenge, Guess
from dailyguess.models.registration import Registration
from dailyguess.services.leaderboard import compute_leaderboard

T0 = datetime(2025, 1, 10, tzinfo=timezone.utc)


def reg(pid, name, unit, team, status="approved"):
    return Registration(participant_id=pid, name=name, unit=unit, team=team, status=status, timestamp=T0)

def guess(pid, ok):
    return Guess(participant_id=pid, participant_name=pid, text="g", timestamp=T0, is_correct=ok)

def challenge(cid, *guesses):
    return Challenge(id=cid, image_ref=f"memory://{cid}", accepted_answers=["a"], guesses=list(guesses), created_at=T0)


REGS = [
    reg("A", "Avi", "Ramon", "Team 4"),
    reg("B", "Bat", "Ramon", "Team 5"),
    reg("C", "Gil", "Tamar", "Team 7"),
    reg("D", "Dana", "Ramon", "Team 4"),
]
CHALLENGES = [
    challenge("c1", guess("A", True), guess("B", False), guess("C", True), guess("ghost", True)),
    challenge("c2", guess("A", False), guess("C", True)),
]


def test_overall_counts_and_order():
    lb = compute_leaderboard(REGS, CHALLENGES)
    rows = {r.participant_id: r for r in lb.overall}
    assert (rows["A"].correct_guesses, rows["A"].total_guesses) == (1, 2)
    assert (rows["B"].correct_guesses, rows["B"].total_guesses) == (0, 1)
    assert (rows["C"].correct_guesses, rows["C"].total_guesses) == (2, 2)
    assert [r.participant_id for r in lb.overall] == ["C", "A", "B", "D"]


def test_registrant_without_guesses_is_listed():
    lb = compute_leaderboard(REGS, [])
    assert [r.participant_id for r in lb.overall] == ["A", "B", "C", "D"]
    assert all(r.total_guesses == 0 and r.accuracy == 0.0 for r in lb.overall)


def test_unregistered_guesses_are_ignored():
    lb = compute_leaderboard(REGS, CHALLENGES)
    assert "ghost" not in {r.participant_id for r in lb.overall}
    total_correct = sum(g.is_correct for ch in CHALLENGES for g in ch.guesses if g.participant_id != "ghost")
    assert sum(r.correct_guesses for r in lb.overall) == total_correct


def test_ties_keep_registration_order():
    regs = [reg(p, p, "Paran", "Team 13") for p in ("X", "Y", "Z")]
    lb = compute_leaderboard(regs, [challenge("c", guess("Z", True), guess("Y", True))])
    assert [r.participant_id for r in lb.overall] == ["Y", "Z", "X"]


def test_group_stats():
    lb = compute_leaderboard(REGS, CHALLENGES)
    units = {g.name: g for g in lb.by_unit}
    assert set(units) == {"Ramon", "Tamar"}
    assert (units["Ramon"].users, units["Ramon"].correct_guesses, units["Ramon"].total_guesses) == (3, 1, 3)
    assert (units["Tamar"].users, units["Tamar"].correct_guesses, units["Tamar"].total_guesses) == (1, 2, 2)

    teams = {g.name: g for g in lb.by_team}
    assert set(teams) == {"Team 4", "Team 5", "Team 7"}
    assert teams["Team 4"].users == 2 and teams["Team 4"].unit == "Ramon"
    assert (teams["Team 4"].correct_guesses, teams["Team 4"].total_guesses) == (1, 2)


def test_groups_sum_to_members():
    lb = compute_leaderboard(REGS, CHALLENGES)
    for groups, attr in ((lb.by_unit, "unit"), (lb.by_team, "team")):
        for g in groups:
            members = [r for r in lb.overall if getattr(r, attr) == g.name]
            assert g.users == len(members)
            assert g.correct_guesses == sum(r.correct_guesses for r in members)
            assert g.total_guesses == sum(r.total_guesses for r in members)


def test_empty_inputs():
    lb = compute_leaderboard([], [])
    assert lb.overall == [] and lb.by_unit == [] and lb.by_team == []


def test_duplicate_registration_ids_count_once():
    regs = [reg("A", "Avi", "Ramon", "Team 4"), reg("A", "Avi again", "Tamar", "Team 7")]
    lb = compute_leaderboard(regs, [challenge("c", guess("A", True))])
    assert len(lb.overall) == 1
    assert lb.overall[0].name == "Avi"
    assert [g.name for g in lb.by_unit] == ["Ramon"]
