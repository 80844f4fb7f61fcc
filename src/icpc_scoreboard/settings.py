import environ


env = environ.Env()

LOG_LEVEL = env("ICPC_SCOREBOARD_LOG_LEVEL", default="INFO")

USE_CLOUD_LOGGING = env.bool("USE_CLOUD_LOGGING", default=False)

WRONG_ATTEMPT_PENALTY = env.int("ICPC_SCOREBOARD_WRONG_ATTEMPT_PENALTY", default=20)  # minutes
