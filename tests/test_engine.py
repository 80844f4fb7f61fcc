"""Tests for the scoreboard engine submissions, freezing and queries."""

import pytest

from icpc_scoreboard.engine import ScoreboardEngine
from icpc_scoreboard.types import Verdict, ContestPhase, AlreadyStartedError, ContestNotStartedError, \
    DuplicateTeamError, UnknownTeamError, AlreadyFrozenError, NotFrozenError


def _started_engine(*teams: str, problem_count: int = 3) -> ScoreboardEngine:
    engine = ScoreboardEngine()
    for team in teams:
        engine.add_team(team)
    engine.start_contest(300, problem_count)
    return engine


def test_lower_penalty_ranks_first() -> None:
    engine = _started_engine("A", "B")
    engine.record_submission(0, "A", Verdict.WRONG_ANSWER, 5)
    engine.record_submission(0, "A", Verdict.ACCEPTED, 20)
    engine.record_submission(0, "B", Verdict.ACCEPTED, 10)

    assert engine.get_team("A").total_penalty == 40
    assert engine.get_team("B").total_penalty == 10
    assert engine.get_ranking() == ["B", "A"]


def test_penalty_is_sum_over_counted_problems() -> None:
    engine = _started_engine("A", "B")
    engine.record_submission(0, "A", Verdict.RUNTIME_ERROR, 3)
    engine.record_submission(0, "A", Verdict.TIME_LIMIT_EXCEEDED, 7)
    engine.record_submission(0, "A", Verdict.ACCEPTED, 50)
    engine.record_submission(2, "A", Verdict.ACCEPTED, 90)
    engine.record_submission(1, "A", Verdict.WRONG_ANSWER, 95)

    team = engine.get_team("A")
    expected = sum(state.penalty() for state in team.problems.values() if state.counts)
    assert team.total_penalty == expected == 2 * 20 + 50 + 90
    assert team.solved_count == 2
    assert team.solve_times_descending == [90, 50]


def test_submissions_after_solving_are_logged_but_ignored() -> None:
    engine = _started_engine("A")
    engine.record_submission(0, "A", Verdict.ACCEPTED, 10)
    engine.record_submission(0, "A", Verdict.WRONG_ANSWER, 20)
    engine.record_submission(0, "A", Verdict.ACCEPTED, 30)

    state = engine.get_team("A").problems[0]
    assert state.solve_time == 10
    assert state.wrong_attempts == 0
    assert len(engine.submissions) == 3
    assert engine.get_team("A").total_penalty == 10


def test_verdict_strings_are_accepted() -> None:
    engine = _started_engine("A")
    engine.record_submission(1, "A", "Wrong_Answer", 10)
    engine.record_submission(1, "A", "Accepted", 15)

    assert engine.get_team("A").total_penalty == 35


def test_invalid_submissions_fail_fast() -> None:
    engine = ScoreboardEngine()
    engine.add_team("A")
    with pytest.raises(ContestNotStartedError):
        engine.record_submission(0, "A", Verdict.ACCEPTED, 1)

    engine.start_contest(300, 2)
    with pytest.raises(ValueError):
        engine.record_submission(0, "A", "Compile_Error", 1)
    with pytest.raises(ValueError):
        engine.record_submission(2, "A", Verdict.ACCEPTED, 1)
    with pytest.raises(UnknownTeamError):
        engine.record_submission(0, "Z", Verdict.ACCEPTED, 1)
    assert engine.submissions == []


def test_add_team_errors() -> None:
    engine = ScoreboardEngine()
    engine.add_team("A")
    with pytest.raises(DuplicateTeamError):
        engine.add_team("A")

    engine.start_contest(300, 2)
    with pytest.raises(AlreadyStartedError):
        engine.add_team("B")
    with pytest.raises(AlreadyStartedError):
        engine.start_contest(300, 2)
    assert engine.get_ranking() == ["A"]


def test_freeze_twice_fails() -> None:
    engine = _started_engine("A")
    engine.freeze()
    assert engine.phase == ContestPhase.FROZEN

    with pytest.raises(AlreadyFrozenError):
        engine.freeze()


def test_scroll_requires_freeze() -> None:
    engine = _started_engine("A")
    with pytest.raises(NotFrozenError):
        engine.scroll()


def test_wrong_answer_while_frozen_is_pending() -> None:
    engine = _started_engine("A", "C")
    engine.record_submission(0, "C", Verdict.ACCEPTED, 30)
    engine.freeze()
    engine.record_submission(1, "C", Verdict.WRONG_ANSWER, 250)

    state = engine.get_team("C").problems[1]
    assert state.pending_frozen_attempts == 1
    assert state.has_pending_freeze
    assert state.wrong_attempts == 0
    team = engine.get_team("C")
    assert (team.solved_count, team.total_penalty) == (1, 30)

    engine.scroll()

    assert not state.has_pending_freeze
    assert state.pending_frozen_attempts == 0
    assert state.wrong_attempts == 1
    assert engine.phase == ContestPhase.RUNNING


def test_accepted_while_frozen_keeps_stale_aggregates() -> None:
    engine = _started_engine("A", "B")
    engine.record_submission(0, "B", Verdict.ACCEPTED, 10)
    engine.freeze()
    engine.record_submission(0, "A", Verdict.ACCEPTED, 200)

    team = engine.get_team("A")
    assert team.problems[0].solved
    assert not team.problems[0].has_pending_freeze
    assert team.solved_count == 0

    # Nothing is pending for A, so the scroll leaves its aggregates untouched
    engine.scroll()
    assert team.solved_count == 0
    assert engine.get_ranking() == ["B", "A"]

    # Any later update of the team picks up the solve
    engine.record_submission(1, "A", Verdict.WRONG_ANSWER, 280)
    assert team.solved_count == 1
    assert team.total_penalty == 200


def test_query_rank() -> None:
    engine = _started_engine("A", "B")
    engine.record_submission(0, "B", Verdict.ACCEPTED, 10)

    result = engine.query_rank("B")
    assert result.place == 1
    assert not result.is_frozen
    assert engine.query_rank("A").place == 2

    engine.freeze()
    assert engine.query_rank("A").is_frozen

    with pytest.raises(UnknownTeamError):
        engine.query_rank("nobody")


def test_query_submission_filters() -> None:
    engine = _started_engine("A", "B")
    engine.record_submission(0, "A", Verdict.WRONG_ANSWER, 5)
    engine.record_submission(1, "A", Verdict.TIME_LIMIT_EXCEEDED, 8)
    engine.record_submission(0, "B", Verdict.ACCEPTED, 9)
    engine.record_submission(0, "A", Verdict.ACCEPTED, 12)
    engine.record_submission(2, "A", Verdict.RUNTIME_ERROR, 20)

    latest = engine.query_submission("A")
    assert (latest.problem, latest.verdict, latest.time) == (2, Verdict.RUNTIME_ERROR, 20)

    assert engine.query_submission("A", problem=0).time == 12
    assert engine.query_submission("A", verdict=Verdict.TIME_LIMIT_EXCEEDED).time == 8
    assert engine.query_submission("A", problem=0, verdict="Wrong_Answer").time == 5
    assert engine.query_submission("A", problem=1, verdict=Verdict.ACCEPTED) is None
    assert engine.query_submission("B", problem=2) is None

    with pytest.raises(UnknownTeamError):
        engine.query_submission("nobody")


def test_flush_is_idempotent() -> None:
    engine = _started_engine("C", "B", "A")
    engine.record_submission(0, "C", Verdict.ACCEPTED, 10)

    engine.flush()
    first = engine.get_ranking()
    engine.flush()
    assert engine.get_ranking() == first == ["C", "A", "B"]
    assert [(team.name, team.place) for team in engine.get_scoreboard().teams] == [("C", 1), ("A", 2), ("B", 3)]


def test_freeze_before_start_does_not_start_the_contest() -> None:
    engine = ScoreboardEngine()
    engine.freeze()
    assert engine.phase == ContestPhase.FROZEN
    engine.scroll()
    assert engine.phase == ContestPhase.NOT_STARTED

    engine.add_team("A")
    engine.start_contest(120, 1)

    assert engine.phase == ContestPhase.RUNNING
    assert engine.duration == 120
    assert engine.problem_count == 1
    assert engine.get_ranking() == ["A"]


def test_freeze_before_start_keeps_teams_open() -> None:
    engine = ScoreboardEngine()
    engine.freeze()
    engine.add_team("A")
    engine.start_contest(120, 1)
    engine.record_submission(0, "A", Verdict.WRONG_ANSWER, 5)

    # Still frozen, so the attempt waits for the scroll
    assert engine.get_team("A").problems[0].has_pending_freeze
    engine.scroll()
    assert engine.get_team("A").problems[0].wrong_attempts == 1
