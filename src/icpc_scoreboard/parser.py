from typing import List, Optional, Union

from icpc_scoreboard.parser_types import CommandParseError, AddTeamCommand, StartCommand, SubmitCommand, \
    FlushCommand, FreezeCommand, ScrollCommand, QueryRankingCommand, QuerySubmissionCommand, EndCommand
from icpc_scoreboard.types import Verdict, problem_index


Command = Union[AddTeamCommand, StartCommand, SubmitCommand, FlushCommand, FreezeCommand, ScrollCommand,
                QueryRankingCommand, QuerySubmissionCommand, EndCommand]

_ALL = "ALL"


def _expect_args(words: List[str], count: int) -> List[str]:
    if len(words) - 1 != count:
        raise CommandParseError(f"{words[0]} expects {count} arguments, got {len(words) - 1}")
    return words[1:]


def _expect_keyword(word: str, keyword: str) -> None:
    if word != keyword:
        raise CommandParseError(f"Expected {keyword} but got {word}")


def _parse_int(text: str) -> int:
    try:
        return int(text)
    except ValueError:
        raise CommandParseError(f"Expected an integer but got {text}")


def _parse_problem(text: str) -> int:
    try:
        return problem_index(text)
    except ValueError as e:
        raise CommandParseError(str(e))


def _parse_verdict(text: str) -> Verdict:
    try:
        return Verdict(text)
    except ValueError:
        raise CommandParseError(f"Unknown verdict {text}")


def _parse_filter(text: str, prefix: str) -> str:
    if not text.startswith(prefix):
        raise CommandParseError(f"Expected {prefix}... but got {text}")
    return text[len(prefix):]


def _parse_query_submission(words: List[str]) -> QuerySubmissionCommand:
    team, where, problem_text, and_text, status_text = _expect_args(words, 5)
    _expect_keyword(where, "WHERE")
    _expect_keyword(and_text, "AND")

    problem_filter = _parse_filter(problem_text, "PROBLEM=")
    status_filter = _parse_filter(status_text, "STATUS=")
    problem: Optional[int] = None
    if problem_filter != _ALL:
        problem = _parse_problem(problem_filter)
    verdict: Optional[Verdict] = None
    if status_filter != _ALL:
        verdict = _parse_verdict(status_filter)
    return QuerySubmissionCommand(team=team, problem=problem, verdict=verdict)


def parse_command(line: str) -> Optional[Command]:
    """Parses a single command line, returning None for blank lines."""
    words = line.split()
    if not words:
        return None

    name = words[0]
    if name == "ADDTEAM":
        (team,) = _expect_args(words, 1)
        return AddTeamCommand(team=team)

    if name == "START":
        duration_text, duration, problem_text, problem_count = _expect_args(words, 4)
        _expect_keyword(duration_text, "DURATION")
        _expect_keyword(problem_text, "PROBLEM")
        return StartCommand(duration=_parse_int(duration), problem_count=_parse_int(problem_count))

    if name == "SUBMIT":
        problem, by, team, with_text, status, at, time = _expect_args(words, 7)
        _expect_keyword(by, "BY")
        _expect_keyword(with_text, "WITH")
        _expect_keyword(at, "AT")
        return SubmitCommand(problem=_parse_problem(problem), team=team, verdict=_parse_verdict(status),
                             time=_parse_int(time))

    if name == "QUERY_RANKING":
        (team,) = _expect_args(words, 1)
        return QueryRankingCommand(team=team)

    if name == "QUERY_SUBMISSION":
        return _parse_query_submission(words)

    no_args_commands = {
        "FLUSH": FlushCommand,
        "FREEZE": FreezeCommand,
        "SCROLL": ScrollCommand,
        "END": EndCommand,
    }
    if name in no_args_commands:
        _expect_args(words, 0)
        return no_args_commands[name]()

    raise CommandParseError(f"Unknown command {name}")
