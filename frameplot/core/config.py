"""Centralized configuration for frameplot.

Loads environment variables, sets defaults, and exposes constants
used across the data, rendering and saving modules.
"""

import os
import tempfile

from dotenv import load_dotenv

load_dotenv("env/.env")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Private scratch area for temporary outputs
TEMP_DIR = os.getenv(
    "FRAMEPLOT_TMPDIR", os.path.join(tempfile.gettempdir(), "frameplot")
)

# External tools
FFMPEG_BIN = os.getenv("FFMPEG_BIN", "ffmpeg")
CONVERT_BIN = os.getenv("CONVERT_BIN", "convert")
PDFLATEX_BIN = os.getenv("PDFLATEX_BIN", "pdflatex")

# Input parsing
CSV_ENCODING = os.getenv("CSV_ENCODING", "utf-8")

try:
    OUTPUT_DPI = int(os.getenv("OUTPUT_DPI", "72"))
except ValueError:
    OUTPUT_DPI = 72
