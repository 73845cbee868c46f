import logging
import os


class Settings:
    JWT_SECRET_KEY = os.environ["SECRET_KEY"]
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(
        os.environ.get("ACCESS_TOKEN_EXPIRE_MINUTES", 60 * 24 * 7)
    )

    ELO_K_FACTOR = float(os.environ.get("ELO_K_FACTOR", 32))
    VOTE_MAX_ATTEMPTS = int(os.environ.get("VOTE_MAX_ATTEMPTS", 3))
    PAIR_BALANCING = os.environ.get("PAIR_BALANCING", "true") == "true"
    LEADERBOARD_CACHE_TTL = int(os.environ.get("LEADERBOARD_CACHE_TTL", 60))

    HUMANIZE_LOGS = os.environ.get("HUMANIZE_LOGS", "false") == "true"
    LOG_LEVEL_STR = os.environ.get("LOG_LEVEL", "INFO")
    LOG_LEVEL = getattr(logging, LOG_LEVEL_STR.upper(), logging.INFO)


settings = Settings()
