import logging
import os
import sys
from typing import Iterable, TextIO

import environ
import google.cloud.logging

from icpc_scoreboard.dispatcher import CommandDispatcher
from icpc_scoreboard.engine import ScoreboardEngine
from icpc_scoreboard.parser import parse_command
from icpc_scoreboard.parser_types import CommandParseError

logger = logging.getLogger(__name__)


def run(lines: Iterable[str], output: TextIO, engine: ScoreboardEngine) -> None:
    """Executes commands until END or the end of the input, writing their responses to `output`."""
    dispatcher = CommandDispatcher(engine)
    for line_number, line in enumerate(lines, start=1):
        try:
            command = parse_command(line)
        except CommandParseError as e:
            logger.warning(f"Skipping line {line_number}: {e}")
            continue
        if command is None:
            continue

        for response in dispatcher.dispatch(command):
            output.write(f"{response}\n")
        if dispatcher.has_ended:
            logger.debug(f"Contest ended at line {line_number}")
            break


def start(lines: Iterable[str], output: TextIO) -> None:
    # Delay import so the environment file is read first
    from icpc_scoreboard import settings

    if settings.USE_CLOUD_LOGGING:
        client = google.cloud.logging.Client()
        client.setup_logging()
    logging.basicConfig(level=logging.INFO)
    logging.getLogger('icpc_scoreboard').setLevel(settings.LOG_LEVEL)

    engine = ScoreboardEngine(wrong_attempt_penalty=settings.WRONG_ATTEMPT_PENALTY)
    run(lines, output, engine)


def main() -> None:
    environ.Env.read_env(os.path.join(os.getcwd(), ".env"))
    start(sys.stdin, sys.stdout)
