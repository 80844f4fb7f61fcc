"""Total order used to rank the teams of the scoreboard."""
from functools import cmp_to_key
from typing import Iterable, List

from icpc_scoreboard.types import TeamRecord


def _compare_solve_times(a: List[int], b: List[int]) -> int:
    # Both lists are sorted largest first, a strict prefix does not decide
    for a_time, b_time in zip(a, b):
        if a_time != b_time:
            return -1 if a_time < b_time else 1
    return 0


def compare_teams(a: TeamRecord, b: TeamRecord) -> int:
    """Returns a negative number when team `a` ranks before team `b`, a positive one otherwise.

    Teams are ordered by more solved problems, then less penalty, then by the
    earliest "hardest" solve (solve times compared largest first) and finally by
    name, so no two distinct teams ever compare equal.
    """
    if a.solved_count != b.solved_count:
        return -1 if a.solved_count > b.solved_count else 1
    if a.total_penalty != b.total_penalty:
        return -1 if a.total_penalty < b.total_penalty else 1
    solve_times = _compare_solve_times(a.solve_times_descending, b.solve_times_descending)
    if solve_times:
        return solve_times
    if a.name != b.name:
        return -1 if a.name < b.name else 1
    return 0


ranking_key = cmp_to_key(compare_teams)


def rank_teams(teams: Iterable[TeamRecord]) -> List[str]:
    return [team.name for team in sorted(teams, key=ranking_key)]
