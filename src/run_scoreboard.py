#!/usr/bin/env python

import sys

import environ


if __name__ == "__main__":
    environ.Env.read_env()

    # Delay import so the environment is loaded first
    from icpc_scoreboard.app import start
    try:
        start(sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        pass
