import logging
from typing import Dict, List, Optional, Tuple, Union

from icpc_scoreboard.ranking import rank_teams
from icpc_scoreboard.types import TeamRecord, ProblemState, Submission, Verdict, ContestPhase, Scoreboard, StandingTeam, \
    StandingProblem, ScrollEvent, ScrollEventKind, Reveal, RankQueryResult, WRONG_ATTEMPT_PENALTY, \
    AlreadyStartedError, ContestNotStartedError, DuplicateTeamError, UnknownTeamError, AlreadyFrozenError, \
    NotFrozenError, problem_name

logger = logging.getLogger(__name__)


class ScoreboardEngine:
    """Keeps the state of an ICPC contest and its ranking, including the freeze and scroll ceremony."""

    def __init__(self, wrong_attempt_penalty: int = WRONG_ATTEMPT_PENALTY) -> None:
        self._wrong_attempt_penalty = wrong_attempt_penalty
        self._phase = ContestPhase.NOT_STARTED
        self._is_frozen = False
        self._duration: Optional[int] = None
        self._problem_count = 0
        self._teams: Dict[str, TeamRecord] = {}
        self._submissions: List[Submission] = []
        # Team names from first to last place, rebuilt on every recomputation
        self._ranking: List[str] = []
        self._ranking_is_stale = True

    @property
    def phase(self) -> ContestPhase:
        if self._is_frozen:
            return ContestPhase.FROZEN
        return self._phase

    @property
    def is_frozen(self) -> bool:
        return self._is_frozen

    @property
    def duration(self) -> Optional[int]:
        return self._duration

    @property
    def problem_count(self) -> int:
        return self._problem_count

    @property
    def submissions(self) -> List[Submission]:
        return list(self._submissions)

    def get_team(self, name: str) -> TeamRecord:
        team = self._teams.get(name)
        if team is None:
            raise UnknownTeamError(f"Team {name} not found")
        return team

    def add_team(self, name: str) -> None:
        if self._phase != ContestPhase.NOT_STARTED:
            raise AlreadyStartedError("The contest has already started")
        if name in self._teams:
            raise DuplicateTeamError(f"Team {name} already exists")

        self._teams[name] = TeamRecord(name=name)
        self._ranking_is_stale = True
        logger.debug(f"Added team {name}")

    def start_contest(self, duration: int, problem_count: int) -> None:
        if self._phase != ContestPhase.NOT_STARTED:
            raise AlreadyStartedError("The contest has already started")
        if problem_count < 0:
            raise ValueError(f"Invalid problem count {problem_count}")

        self._duration = duration
        self._problem_count = problem_count
        self._phase = ContestPhase.RUNNING
        self._ranking_is_stale = True
        logger.debug(f"Contest started with {self.problem_count} problems "
                     f"and a duration of {self.duration} minutes")

    def record_submission(self, problem: int, team_name: str, verdict: Union[Verdict, str], time: int) -> None:
        if self._phase == ContestPhase.NOT_STARTED:
            raise ContestNotStartedError("The contest has not started")
        if not 0 <= problem < self._problem_count:
            raise ValueError(f"Invalid problem {problem}, the contest has {self._problem_count} problems")
        # Fails with ValueError on an unknown verdict string
        verdict = Verdict(verdict)
        team = self.get_team(team_name)

        self._submissions.append(Submission(team=team_name, problem=problem, verdict=verdict, time=time))

        state = team.get_problem(problem)
        if state.solved:
            return

        if verdict == Verdict.ACCEPTED:
            state.solved = True
            state.solve_time = time
            # While frozen the solve stays out of the aggregates until the team is updated again
            if not self.is_frozen:
                self._update_team(team)
        elif self.is_frozen:
            state.pending_frozen_attempts += 1
            state.has_pending_freeze = True
        else:
            state.wrong_attempts += 1
            self._update_team(team)

    def flush(self) -> None:
        self._refresh_ranking()

    def freeze(self) -> None:
        if self.is_frozen:
            raise AlreadyFrozenError("The scoreboard is already frozen")
        # Freezing does not start the contest, teams can still be added before START
        self._is_frozen = True
        logger.debug("Scoreboard frozen")

    def scroll(self) -> List[ScrollEvent]:
        """Reveals the frozen problems one at a time, from the last placed team upwards.

        Returns the scoreboard before scrolling, one reveal for every revealed
        problem that moves its team up in the ranking, and the final scoreboard.
        """
        if not self.is_frozen:
            raise NotFrozenError("The scoreboard is not frozen")

        self._refresh_ranking()
        events = [ScrollEvent(kind=ScrollEventKind.SNAPSHOT, scoreboard=self._build_scoreboard())]

        while True:
            pending = self._find_lowest_pending_freeze()
            if pending is None:
                break

            team, problem = pending
            previous_place = self._ranking.index(team.name) + 1
            team.problems[problem].reveal()
            self._update_team(team)
            self._refresh_ranking()
            logger.debug(f"Revealed problem {problem_name(problem)} of team {team.name}")

            place = self._ranking.index(team.name) + 1
            if place < previous_place:
                # The overtaken team now sits right below the revealed one
                reveal = Reveal(
                    team=team.name,
                    displaced_team=self._ranking[place],
                    total_solved=team.solved_count,
                    total_penalty=team.total_penalty,
                )
                events.append(ScrollEvent(kind=ScrollEventKind.REVEAL, reveal=reveal))

        self._is_frozen = False
        events.append(ScrollEvent(kind=ScrollEventKind.FINAL_SNAPSHOT, scoreboard=self._build_scoreboard()))
        return events

    def query_rank(self, team_name: str) -> RankQueryResult:
        if team_name not in self._teams:
            raise UnknownTeamError(f"Team {team_name} not found")

        self._refresh_ranking()
        place = self._ranking.index(team_name) + 1
        return RankQueryResult(team=team_name, place=place, is_frozen=self.is_frozen)

    def query_submission(
            self,
            team_name: str,
            problem: Optional[int] = None,
            verdict: Optional[Union[Verdict, str]] = None,
    ) -> Optional[Submission]:
        """Returns the latest submission of the team matching the filters, where None matches anything."""
        if team_name not in self._teams:
            raise UnknownTeamError(f"Team {team_name} not found")
        if verdict is not None:
            verdict = Verdict(verdict)

        for submission in reversed(self._submissions):
            if submission.team != team_name:
                continue
            if problem is not None and submission.problem != problem:
                continue
            if verdict is not None and submission.verdict != verdict:
                continue
            return submission
        return None

    def get_ranking(self) -> List[str]:
        self._refresh_ranking()
        return list(self._ranking)

    def get_scoreboard(self) -> Scoreboard:
        self._refresh_ranking()
        return self._build_scoreboard()

    def count_pending_freezes(self) -> int:
        return sum(1 for team in self._teams.values()
                   for state in team.problems.values() if state.has_pending_freeze)

    def _update_team(self, team: TeamRecord) -> None:
        team.update(self._wrong_attempt_penalty)
        self._ranking_is_stale = True

    def _refresh_ranking(self) -> None:
        # Cached aggregates may be behind the problem states while frozen, so always sort again
        if not self._ranking_is_stale and not self.is_frozen:
            return
        self._ranking = rank_teams(self._teams.values())
        self._ranking_is_stale = False

    def _find_lowest_pending_freeze(self) -> Optional[Tuple[TeamRecord, int]]:
        for name in reversed(self._ranking):
            team = self._teams[name]
            for problem in range(self._problem_count):
                state = team.problems.get(problem)
                if state and state.has_pending_freeze:
                    return team, problem
        return None

    def _build_scoreboard(self) -> Scoreboard:
        teams = []
        for place, name in enumerate(self._ranking, start=1):
            team = self._teams[name]
            problems = []
            for problem in range(self._problem_count):
                state = team.problems.get(problem) or ProblemState()
                problems.append(StandingProblem(
                    name=problem_name(problem),
                    solved=state.solved,
                    wrong_attempts=state.wrong_attempts,
                    pending_frozen_attempts=state.pending_frozen_attempts,
                    has_pending_freeze=state.has_pending_freeze,
                ))
            teams.append(StandingTeam(
                name=name, place=place, total_solved=team.solved_count, total_penalty=team.total_penalty,
                problems=problems))
        return Scoreboard(teams=teams)
