import enum
from dataclasses import dataclass, field
from typing import List, Dict, Optional


WRONG_ATTEMPT_PENALTY = 20


class ScoreboardError(Exception):
    pass


class AlreadyStartedError(ScoreboardError):
    pass


class ContestNotStartedError(ScoreboardError):
    pass


class DuplicateTeamError(ScoreboardError):
    pass


class UnknownTeamError(ScoreboardError):
    pass


class AlreadyFrozenError(ScoreboardError):
    pass


class NotFrozenError(ScoreboardError):
    pass


@enum.unique
class Verdict(enum.Enum):
    ACCEPTED = "Accepted"
    WRONG_ANSWER = "Wrong_Answer"
    RUNTIME_ERROR = "Runtime_Error"
    TIME_LIMIT_EXCEEDED = "Time_Limit_Exceed"


@enum.unique
class ContestPhase(enum.Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FROZEN = "frozen"


def problem_name(problem: int) -> str:
    return chr(ord('A') + problem)


def problem_index(name: str) -> int:
    if len(name) != 1 or not 'A' <= name <= 'Z':
        raise ValueError(f"Invalid problem name {name!r}")
    return ord(name) - ord('A')


@dataclass(frozen=True)
class Submission:
    team: str
    problem: int
    verdict: Verdict
    time: int

    @property
    def problem_name(self) -> str:
        return problem_name(self.problem)


@dataclass
class ProblemState:
    solved: bool = False
    solve_time: int = -1
    wrong_attempts: int = 0
    pending_frozen_attempts: int = 0
    has_pending_freeze: bool = False

    @property
    def total_attempts(self) -> int:
        return self.wrong_attempts + self.pending_frozen_attempts

    @property
    def counts(self) -> bool:
        """Whether the problem contributes to the team's aggregates."""
        return self.solved and not self.has_pending_freeze

    def penalty(self, wrong_attempt_penalty: int = WRONG_ATTEMPT_PENALTY) -> int:
        if not self.solved:
            return 0
        return wrong_attempt_penalty * self.wrong_attempts + self.solve_time

    def reveal(self) -> None:
        self.wrong_attempts += self.pending_frozen_attempts
        self.pending_frozen_attempts = 0
        self.has_pending_freeze = False


@dataclass
class TeamRecord:
    name: str
    problems: Dict[int, ProblemState] = field(default_factory=dict)
    solved_count: int = 0
    total_penalty: int = 0
    solve_times_descending: List[int] = field(default_factory=list)

    def get_problem(self, problem: int) -> ProblemState:
        """Returns the state of a problem, creating an untouched one on first access."""
        state = self.problems.get(problem)
        if state is None:
            state = ProblemState()
            self.problems[problem] = state
        return state

    def update(self, wrong_attempt_penalty: int = WRONG_ATTEMPT_PENALTY) -> None:
        """Recomputes the aggregates from scratch out of the problem states."""
        counted = [state for state in self.problems.values() if state.counts]
        self.solved_count = len(counted)
        self.total_penalty = sum(state.penalty(wrong_attempt_penalty) for state in counted)
        self.solve_times_descending = sorted((state.solve_time for state in counted), reverse=True)


@dataclass(frozen=True)
class StandingProblem:
    name: str
    solved: bool
    wrong_attempts: int
    pending_frozen_attempts: int
    has_pending_freeze: bool

    @property
    def total_attempts(self) -> int:
        return self.wrong_attempts + self.pending_frozen_attempts


@dataclass(frozen=True)
class StandingTeam:
    name: str
    place: int
    total_solved: int
    total_penalty: int
    problems: List[StandingProblem]


@dataclass(frozen=True)
class Scoreboard:
    teams: List[StandingTeam]


@dataclass(frozen=True)
class Reveal:
    team: str
    displaced_team: str
    total_solved: int
    total_penalty: int


@enum.unique
class ScrollEventKind(enum.Enum):
    SNAPSHOT = "snapshot"
    REVEAL = "reveal"
    FINAL_SNAPSHOT = "final_snapshot"


@dataclass(frozen=True)
class ScrollEvent:
    kind: ScrollEventKind
    scoreboard: Optional[Scoreboard] = None
    reveal: Optional[Reveal] = None


@dataclass(frozen=True)
class RankQueryResult:
    team: str
    place: int
    is_frozen: bool
