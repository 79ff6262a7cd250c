"""
Runtime configuration.

Values come from the environment, optionally seeded from a .env file in
the working directory.
"""

import os

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Base URL for game links in moderator reports
GAME_URL_BASE = os.getenv("ASSESSMENT_GAME_URL", "https://lichess.org").rstrip("/")

# Number of games listed in an autoreport
REPORT_MAX_GAMES = int(os.getenv("ASSESSMENT_REPORT_MAX_GAMES", "10"))
