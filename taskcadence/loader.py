"""YAML checklist file loader and validator."""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import pydantic
import yaml

from . import constants
from .schema import CalendarPolicy, ChecklistFile, ChecklistTemplate, ProjectionConfig

logger = logging.getLogger(__name__)


def find_checklists_location() -> Optional[tuple[str, Path]]:
    """
    Locate checklist configuration (directory or file).

    Search order (highest to lowest priority):
    1. TASKCADENCE_DIR environment variable → directory mode
    2. TASKCADENCE_FILE environment variable → file mode
    3. checklists/ directory in current directory → directory mode
    4. checklists.yaml in current directory → file mode

    Returns:
        Tuple of ("dir", Path) or ("file", Path), or None if not found
    """
    if env_dir := os.getenv(constants.ENV_CHECKLISTS_DIR):
        path = Path(env_dir)
        if path.is_dir():
            return ("dir", path)
        logger.warning("TASKCADENCE_DIR points to non-existent directory: %s", env_dir)

    if env_file := os.getenv(constants.ENV_CHECKLISTS_FILE):
        path = Path(env_file)
        if path.is_file():
            return ("file", path)
        logger.warning("TASKCADENCE_FILE points to non-existent file: %s", env_file)

    cwd_dir = Path.cwd() / constants.DEFAULT_CHECKLISTS_DIR
    if cwd_dir.is_dir():
        return ("dir", cwd_dir)

    cwd_file = Path.cwd() / constants.DEFAULT_CHECKLISTS_FILE
    if cwd_file.is_file():
        return ("file", cwd_file)

    return None


def _read_yaml(filepath: Path) -> Any:
    with filepath.open() as f:
        return yaml.safe_load(f)


def load_checklist_from_file(filepath: Path) -> Optional[ChecklistTemplate]:
    """
    Load a single checklist template from an individual YAML file.

    Args:
        filepath: Path to individual checklist YAML file

    Returns:
        ChecklistTemplate or None if file is invalid

    Note:
        Errors are logged but not raised - allows directory loading to continue
    """
    try:
        data = _read_yaml(filepath)

        if data is None:
            logger.warning("Empty checklist file: %s", filepath)
            return None

        checklist = ChecklistTemplate(**data)

        # Validate filename matches checklist ID
        expected_filename = f"{checklist.id}.yaml"
        if filepath.name != expected_filename:
            logger.error(
                "Failed to load checklist from '%s':\n"
                "  Checklist ID '%s' does not match filename.\n"
                "  Expected: '%s'\n"
                "  Found: '%s'\n"
                "  Fix: Rename file to '%s' or change 'id' field to '%s'",
                filepath,
                checklist.id,
                expected_filename,
                filepath.name,
                expected_filename,
                filepath.stem,
            )
            return None

        return checklist

    except yaml.YAMLError as e:
        logger.error("YAML parsing error in '%s': %s", filepath, e)
        return None
    except (ValueError, TypeError) as e:
        # pydantic.ValidationError is a ValueError
        logger.error("Invalid checklist data in '%s': %s", filepath, e)
        return None


def _load_optional_model(filepath: Path, model: type[pydantic.BaseModel], label: str):
    """Load an optional side file (calendar/config), falling back to defaults."""
    if not filepath.is_file():
        return model()

    try:
        data = _read_yaml(filepath)
        if data is None:
            return model()
        loaded = model(**data)
        logger.debug("Loaded %s from: %s", label, filepath)
        return loaded
    except (yaml.YAMLError, ValueError, TypeError) as e:
        logger.warning("Failed to load %s from '%s', using defaults: %s", label, filepath, e)
        return model()


def load_checklists_from_directory(dirpath: Path) -> ChecklistFile:
    """
    Load all checklists from a directory structure.

    Directory structure:
        checklists/
        ├── _calendar.yaml         # Tenant calendar (optional)
        ├── _config.yaml           # Projection bounds (optional)
        ├── checklist-id-1.yaml    # Individual checklist files
        └── ...

    Args:
        dirpath: Path to checklists directory

    Returns:
        ChecklistFile with all loaded checklists
    """
    logger.info("Loading checklists from directory: %s", dirpath)

    calendar = _load_optional_model(
        dirpath / constants.CALENDAR_FILENAME, CalendarPolicy, "calendar"
    )
    config = _load_optional_model(dirpath / constants.CONFIG_FILENAME, ProjectionConfig, "config")

    reserved = {constants.CALENDAR_FILENAME, constants.CONFIG_FILENAME}
    checklists = []
    seen_ids = {}

    for checklist_path in sorted(dirpath.glob(constants.CHECKLIST_FILE_PATTERN)):
        if checklist_path.name in reserved or checklist_path.name.startswith("."):
            continue

        checklist = load_checklist_from_file(checklist_path)
        if checklist is None:
            continue

        if checklist.id in seen_ids:
            logger.error(
                "Duplicate checklist ID '%s' found in multiple files:\n"
                "  First: %s\n"
                "  Duplicate: %s\n"
                "  The duplicate will be ignored.",
                checklist.id,
                seen_ids[checklist.id],
                checklist_path,
            )
            continue

        seen_ids[checklist.id] = checklist_path
        checklists.append(checklist)

    checklist_file = ChecklistFile(calendar=calendar, config=config, checklists=checklists)

    logger.info(
        "Loaded %d checklists (%d enabled) from directory: %s",
        len(checklist_file.checklists),
        sum(1 for c in checklist_file.checklists if c.enabled),
        dirpath,
    )

    return checklist_file


def _load_single_file(filepath: Path) -> ChecklistFile:
    logger.info("Loading checklists from: %s", filepath)

    try:
        data = _read_yaml(filepath)

        if data is None:
            logger.warning("Empty checklists file: %s", filepath)
            return ChecklistFile()

        if not isinstance(data, dict):
            raise ValueError(
                f"Top level of {filepath} must be a mapping, got {type(data).__name__}"
            )

        # Handle case where checklists key is None (all commented out)
        if data.get("checklists") is None:
            data["checklists"] = []

        checklist_file = ChecklistFile.model_validate(data)

        logger.info(
            "Loaded %d checklists (%d enabled)",
            len(checklist_file.checklists),
            sum(1 for c in checklist_file.checklists if c.enabled),
        )

        return checklist_file

    except yaml.YAMLError as e:
        logger.error("YAML parsing error in %s: %s", filepath, e)
        raise
    except pydantic.ValidationError as e:
        logger.error("Error loading checklists from %s: %s", filepath, e)
        raise


def load_checklists_file(filepath: Optional[Path] = None) -> Optional[ChecklistFile]:
    """
    Load and validate checklists (supports both directory and file formats).

    Args:
        filepath: Optional explicit path to a checklists.yaml file.
                  If None, uses find_checklists_location() to auto-discover.

    Returns:
        ChecklistFile or None if nothing was found

    Raises:
        yaml.YAMLError: If YAML parsing fails (file mode only)
        pydantic.ValidationError: If schema validation fails (file mode only)
        ValueError: If the file is not a mapping at the top level (file mode only)
    """
    if filepath is not None:
        return _load_single_file(filepath)

    location = find_checklists_location()
    if location is None:
        logger.info("No checklists file or directory found")
        return None

    mode, path = location
    if mode == "dir":
        return load_checklists_from_directory(path)
    return _load_single_file(path)


def load_checklists_from_path(path: Path) -> Optional[ChecklistFile]:
    """
    Load checklists from an explicit file or directory path.

    Args:
        path: checklists.yaml file or checklists/ directory

    Returns:
        ChecklistFile, or None if the path is neither a file nor a directory
    """
    if path.is_dir():
        return load_checklists_from_directory(path)
    if path.is_file():
        return load_checklists_file(path)
    return None


def get_enabled_checklists(checklist_file: Optional[ChecklistFile]) -> list[ChecklistTemplate]:
    """
    Get list of enabled checklists.

    Args:
        checklist_file: ChecklistFile or None

    Returns:
        List of enabled ChecklistTemplate objects
    """
    if checklist_file is None:
        return []

    return [c for c in checklist_file.checklists if c.enabled]
