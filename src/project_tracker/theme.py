"""Color & style helpers.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Styles are looked up by role ('header', 'done', 'bar', ...) in STYLES.
  The palette starts from env vars and defaults; load_palette(directory)
  re-resolves it once the data directory is known, so a .env file there
  can override colors too (real env var wins).
"""
from __future__ import annotations
import os, sys
from pathlib import Path
from typing import Dict, Mapping, Optional

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_USE_TRUECOLOR = _ENABLE and any(tok in os.environ.get("COLORTERM", "").lower() for tok in ("truecolor", "24bit"))

PALETTE_DEFAULTS: Dict[str, str] = {
    'TRACKER_PRIMARY': '#476EAE',
    'TRACKER_PENDING': '#E06C75',
    'TRACKER_INPROGRESS': '#F6FF99',
    'TRACKER_DONE': '#A7E399',
}

RESET = "\033[0m"
BOLD = "\033[1m"
DIM = "\033[2m"

# role -> ANSI prefix; filled by load_palette
STYLES: Dict[str, str] = {}


def _normalize_hex(value: str) -> Optional[str]:
    h = value.strip().strip('"\'').lstrip('#')
    if len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h):
        return '#' + h
    return None


def fg_code(hex_code: str, truecolor: bool) -> str:
    """Foreground escape for ``#rrggbb``; 256-color cube unless truecolor."""
    h = hex_code.lstrip('#')
    r, g, b = int(h[0:2], 16), int(h[2:4], 16), int(h[4:6], 16)
    if truecolor:
        return f"\033[38;2;{r};{g};{b}m"
    r6, g6, b6 = (int(round(x / 255 * 5)) for x in (r, g, b))
    return f"\033[38;5;{16 + 36 * r6 + 6 * g6 + b6}m"


def read_env_file(path: Path) -> Dict[str, str]:
    """Palette overrides from a KEY=VALUE file.

    A missing, unreadable or non-UTF-8 file yields no overrides; unknown
    keys and bad hex values are skipped line by line.
    """
    overrides: Dict[str, str] = {}
    try:
        text = path.read_text(encoding='utf-8')
    except (OSError, UnicodeDecodeError):
        return overrides
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith('#') or '=' not in line:
            continue
        k, v = line.split('=', 1)
        k = k.strip()
        hex_value = _normalize_hex(v)
        if k in PALETTE_DEFAULTS and hex_value:
            overrides[k] = hex_value
    return overrides


def resolve_palette(directory: Optional[Path] = None,
                    environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Hex color per palette key: env var > ``directory/.env`` > default."""
    env = os.environ if environ is None else environ
    file_overrides = read_env_file(Path(directory) / '.env') if directory is not None else {}
    palette: Dict[str, str] = {}
    for key, default in PALETTE_DEFAULTS.items():
        palette[key] = _normalize_hex(env.get(key, '')) or file_overrides.get(key, default)
    return palette


def load_palette(directory: Optional[Path] = None,
                 environ: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
    """Rebuild STYLES for ``directory``; return the resolved hex palette."""
    palette = resolve_palette(directory, environ)
    if _ENABLE:
        fg = {k: fg_code(v, _USE_TRUECOLOR) for k, v in palette.items()}
    else:
        fg = {k: '' for k in palette}
    bold = BOLD if _ENABLE else ''
    dim = DIM if _ENABLE else ''
    STYLES.clear()
    STYLES.update({
        'bold': bold,
        'header': fg['TRACKER_PRIMARY'],
        'id': fg['TRACKER_PRIMARY'] + bold,
        'empty': dim + fg['TRACKER_PRIMARY'],
        'pending': fg['TRACKER_PENDING'],
        'in-progress': fg['TRACKER_INPROGRESS'],
        'done': fg['TRACKER_DONE'],
        'bar': fg['TRACKER_DONE'],
        'percent': bold + fg['TRACKER_INPROGRESS'],
    })
    return palette


def color(text: str, *roles: str) -> str:
    """Wrap ``text`` in the styles for ``roles``; plain text when color is off."""
    if not _ENABLE:
        return text
    return ''.join(STYLES.get(role, '') for role in roles) + text + RESET


load_palette()

__all__ = [
    'color', 'fg_code', 'load_palette', 'read_env_file', 'resolve_palette',
    'PALETTE_DEFAULTS', 'STYLES',
]
