from dataclasses import dataclass
from typing import Optional

from icpc_scoreboard.types import Verdict


class CommandParseError(ValueError):
    pass


@dataclass(frozen=True)
class AddTeamCommand:
    team: str


@dataclass(frozen=True)
class StartCommand:
    duration: int
    problem_count: int


@dataclass(frozen=True)
class SubmitCommand:
    problem: int
    team: str
    verdict: Verdict
    time: int


@dataclass(frozen=True)
class FlushCommand:
    pass


@dataclass(frozen=True)
class FreezeCommand:
    pass


@dataclass(frozen=True)
class ScrollCommand:
    pass


@dataclass(frozen=True)
class QueryRankingCommand:
    team: str


@dataclass(frozen=True)
class QuerySubmissionCommand:
    team: str
    # None means ALL
    problem: Optional[int]
    verdict: Optional[Verdict]


@dataclass(frozen=True)
class EndCommand:
    pass
