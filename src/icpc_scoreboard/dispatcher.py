import logging
from typing import List

from icpc_scoreboard.engine import ScoreboardEngine
from icpc_scoreboard.parser import Command
from icpc_scoreboard.parser_types import AddTeamCommand, StartCommand, SubmitCommand, FlushCommand, \
    FreezeCommand, ScrollCommand, QueryRankingCommand, QuerySubmissionCommand, EndCommand
from icpc_scoreboard.types import Scoreboard, StandingTeam, StandingProblem, ScrollEventKind, Reveal, \
    AlreadyStartedError, ContestNotStartedError, DuplicateTeamError, UnknownTeamError, AlreadyFrozenError, NotFrozenError

logger = logging.getLogger(__name__)


_FROZEN_RANKING_WARNING = "[Warning]Scoreboard is frozen. The ranking may be inaccurate until it were scrolled."


def _format_problem(problem: StandingProblem) -> str:
    if problem.has_pending_freeze:
        if problem.wrong_attempts == 0:
            return f"0/{problem.pending_frozen_attempts}"
        return f"-{problem.wrong_attempts}/{problem.pending_frozen_attempts}"
    if problem.solved:
        if problem.wrong_attempts == 0:
            return "+"
        return f"+{problem.wrong_attempts}"
    if problem.total_attempts == 0:
        return "."
    return f"-{problem.total_attempts}"


def _format_team(team: StandingTeam) -> str:
    cells = [team.name, str(team.place), str(team.total_solved), str(team.total_penalty)]
    cells.extend(map(_format_problem, team.problems))
    return " ".join(cells)


def format_scoreboard(scoreboard: Scoreboard) -> List[str]:
    return [_format_team(team) for team in scoreboard.teams]


def format_reveal(reveal: Reveal) -> str:
    return f"{reveal.team} {reveal.displaced_team} {reveal.total_solved} {reveal.total_penalty}"


class CommandDispatcher:
    """Runs parsed commands against the engine and renders their results as output lines."""

    def __init__(self, engine: ScoreboardEngine) -> None:
        self._engine = engine
        self.has_ended = False

    def dispatch(self, command: Command) -> List[str]:
        if isinstance(command, AddTeamCommand):
            return self._add_team(command)
        if isinstance(command, StartCommand):
            return self._start(command)
        if isinstance(command, SubmitCommand):
            self._submit(command)
            return []
        if isinstance(command, FlushCommand):
            self._engine.flush()
            return ["[Info]Flush scoreboard."]
        if isinstance(command, FreezeCommand):
            return self._freeze()
        if isinstance(command, ScrollCommand):
            return self._scroll()
        if isinstance(command, QueryRankingCommand):
            return self._query_ranking(command)
        if isinstance(command, QuerySubmissionCommand):
            return self._query_submission(command)
        if isinstance(command, EndCommand):
            self.has_ended = True
            return ["[Info]Competition ends."]
        raise TypeError(f"Unexpected command {command!r}")

    def _add_team(self, command: AddTeamCommand) -> List[str]:
        try:
            self._engine.add_team(command.team)
        except AlreadyStartedError:
            return ["[Error]Add failed: competition has started."]
        except DuplicateTeamError:
            return ["[Error]Add failed: duplicated team name."]
        return ["[Info]Add successfully."]

    def _start(self, command: StartCommand) -> List[str]:
        try:
            self._engine.start_contest(command.duration, command.problem_count)
        except AlreadyStartedError:
            return ["[Error]Start failed: competition has started."]
        return ["[Info]Competition starts."]

    def _submit(self, command: SubmitCommand) -> None:
        if command.problem >= self._engine.problem_count:
            logger.warning(f"Ignoring submission of {command.team} to unknown problem {command.problem}")
            return
        try:
            self._engine.record_submission(command.problem, command.team, command.verdict, command.time)
        except (ContestNotStartedError, UnknownTeamError) as e:
            logger.warning(f"Ignoring submission of {command.team}: {e}")

    def _freeze(self) -> List[str]:
        try:
            self._engine.freeze()
        except AlreadyFrozenError:
            return ["[Error]Freeze failed: scoreboard has been frozen."]
        return ["[Info]Freeze scoreboard."]

    def _scroll(self) -> List[str]:
        try:
            events = self._engine.scroll()
        except NotFrozenError:
            return ["[Error]Scroll failed: scoreboard has not been frozen."]

        lines = ["[Info]Scroll scoreboard."]
        for event in events:
            if event.kind == ScrollEventKind.REVEAL:
                lines.append(format_reveal(event.reveal))
            else:
                lines.extend(format_scoreboard(event.scoreboard))
        logger.debug(f"Scrolled the scoreboard with {len(events) - 2} rank changes")
        return lines

    def _query_ranking(self, command: QueryRankingCommand) -> List[str]:
        try:
            result = self._engine.query_rank(command.team)
        except UnknownTeamError:
            return ["[Error]Query ranking failed: cannot find the team."]

        lines = ["[Info]Complete query ranking."]
        if result.is_frozen:
            lines.append(_FROZEN_RANKING_WARNING)
        lines.append(f"{result.team} NOW AT RANKING {result.place}")
        return lines

    def _query_submission(self, command: QuerySubmissionCommand) -> List[str]:
        try:
            submission = self._engine.query_submission(command.team, command.problem, command.verdict)
        except UnknownTeamError:
            return ["[Error]Query submission failed: cannot find the team."]

        lines = ["[Info]Complete query submission."]
        if not submission:
            lines.append("Cannot find any submission.")
        else:
            lines.append(f"{submission.team} {submission.problem_name} {submission.verdict.value} "
                         f"{submission.time}")
        return lines
