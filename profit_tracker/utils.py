import logging
import re
from datetime import date, datetime
from pathlib import Path

import pandas as pd

logger = logging.getLogger(__name__)


def get_date_suffix_for_filename() -> str:
    """Returns the current date as a YYYY-MM-DD string for filenames."""
    return datetime.now().strftime("%Y-%m-%d")


def find_latest_report(directory: Path, prefix: str) -> tuple[Path, date] | None:
    """
    Finds the newest '<prefix>YYYY-MM-DD.csv' file in `directory`.
    Returns the path and the date parsed from its name, or None if nothing matches.
    """
    pattern = re.compile(rf"^{re.escape(prefix)}(\d{{4}}-\d{{2}}-\d{{2}})\.csv$")
    candidates = []
    for path in directory.glob(f"{prefix}*.csv"):
        match = pattern.match(path.name)
        if not match:
            continue
        try:
            file_date = datetime.strptime(match.group(1), "%Y-%m-%d").date()
        except ValueError:
            logger.warning(f"Ignoring {path.name}: invalid date in filename.")
            continue
        candidates.append((file_date, path))

    if not candidates:
        return None
    file_date, path = max(candidates)
    return path, file_date


def load_csv(file_path: Path, skiprows: int = 0) -> pd.DataFrame | None:
    """
    A CSV loader with an encoding fallback.
    It will attempt to read a file in the following order:
    1. UTF-8 with BOM support ('utf-8-sig').
    2. Latin-1, which reads any byte but might misinterpret characters.
    """
    try:
        return pd.read_csv(file_path, encoding="utf-8-sig", skiprows=skiprows)

    except UnicodeDecodeError:
        logger.info(
            f"UTF-8 decoding failed for {file_path.name}. Retrying with 'latin-1'."
        )
        try:
            return pd.read_csv(file_path, encoding="latin-1", skiprows=skiprows)
        except (OSError, ValueError, pd.errors.ParserError) as e_latin1:
            logger.error(
                f"Could not read {file_path.name} even with latin-1. Reason: {e_latin1}"
            )
            return None

    except FileNotFoundError:
        logger.info(f"File not found at {file_path}, skipping.")
        return None

    except (pd.errors.ParserError, pd.errors.EmptyDataError) as e_parse:
        logger.error(f"Could not parse {file_path.name}. Reason: {e_parse}")
        return None
