"""Where the tracker keeps its data.

Resolution order (first hit wins):
    1. explicit ``--data-dir`` passed in by the CLI
    2. PROJECT_TRACKER_HOME
    3. $XDG_CONFIG_HOME/project-tracker
    4. ~/.config/project-tracker

Nothing here touches the filesystem; the storage layer creates the
directory when it first saves.
"""
from __future__ import annotations
import os
from pathlib import Path
from typing import Mapping, Optional

APP_DIR_NAME = 'project-tracker'
DATA_FILE_NAME = 'data.json'
LOG_ENV = 'PROJECT_TRACKER_LOG'


def data_dir(override: Optional[str] = None, env: Optional[Mapping[str, str]] = None) -> Path:
    environ = os.environ if env is None else env
    if override:
        return Path(override).expanduser()
    home = environ.get('PROJECT_TRACKER_HOME')
    if home:
        return Path(home).expanduser()
    xdg = environ.get('XDG_CONFIG_HOME')
    if xdg:
        return Path(xdg).expanduser() / APP_DIR_NAME
    return Path.home() / '.config' / APP_DIR_NAME


def data_file(directory: Path) -> Path:
    return Path(directory) / DATA_FILE_NAME


def log_level(env: Optional[Mapping[str, str]] = None) -> Optional[str]:
    """Level name from PROJECT_TRACKER_LOG, or None when logging stays off."""
    environ = os.environ if env is None else env
    value = (environ.get(LOG_ENV) or '').strip().upper()
    if value in {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}:
        return value
    return None
