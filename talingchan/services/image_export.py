"""
Decklist image export.

Renders the printable decklist (title, three columns of grouped cards)
to a PNG:

  +-------------------------------------------------------+
  |                     DECK NAME                         |
  |  Only#1 (1)        |  Magic (12)        | Life Deck (5)|
  |  x1 ...            |  x4 ...            | x1 ...       |
  |  Avatar (20)       |  Construct (17)    |              |
  |  x4 ...            |  x3 ...            |              |
  +-------------------------------------------------------+
"""

import io
import logging
from pathlib import Path

from PIL import Image, ImageDraw, ImageFont

from talingchan.models.deck import DeckSnapshot
from talingchan.models.rules import AVATAR_TYPE, CONSTRUCT_TYPE, MAGIC_TYPE
from talingchan.services.presentation import ONLY_ONE_GROUP, OTHER_GROUP, group_main_deck
from talingchan.services.tournament_export import (
    ExportedFile,
    ExportValidationError,
    safe_filename_part,
)

logger = logging.getLogger(__name__)

PNG_MEDIA_TYPE = "image/png"

BACKGROUND = "#1e1e1e"
HEADER_COLOR = "#f0c040"
TEXT_COLOR = "#e8e8e8"

COLUMN_WIDTH = 360
PADDING = 24
TITLE_HEIGHT = 56
LINE_HEIGHT = 22
GROUP_GAP = 14

# Main deck groups per printable column; the last column is the life deck
PRINT_COLUMNS: tuple[tuple[str, ...], ...] = (
    (ONLY_ONE_GROUP, AVATAR_TYPE),
    (MAGIC_TYPE, CONSTRUCT_TYPE, OTHER_GROUP),
)

Line = tuple[str, bool]  # (text, is_header)

# Fonts with Thai coverage, tried in order after the configured font
FONT_SEARCH_PATHS: tuple[Path, ...] = (
    # Debian/Ubuntu: fonts-noto-core, fonts-tlwg-*
    Path("/usr/share/fonts/truetype/noto/NotoSansThai-Regular.ttf"),
    Path("/usr/share/fonts/opentype/noto/NotoSansThai-Regular.ttf"),
    Path("/usr/share/fonts/truetype/tlwg/Garuda.ttf"),
    Path("/usr/share/fonts/truetype/tlwg/Loma.ttf"),
    # Fedora/Arch
    Path("/usr/share/fonts/google-noto/NotoSansThai-Regular.ttf"),
    Path("/usr/share/fonts/noto/NotoSansThai-Regular.ttf"),
    # Windows
    Path("C:/Windows/Fonts/LeelawUI.ttf"),
    Path("C:/Windows/Fonts/tahoma.ttf"),
    # macOS
    Path("/System/Library/Fonts/Supplemental/Tahoma.ttf"),
)


def _font_candidates(font_path: Path | None) -> list[Path]:
    if font_path is None:
        return list(FONT_SEARCH_PATHS)
    if not font_path.exists():
        logger.warning("Configured font %s does not exist", font_path)
    return [font_path, *FONT_SEARCH_PATHS]


def _load_font(font_path: Path | None, size: int) -> ImageFont.ImageFont | ImageFont.FreeTypeFont:
    """
    Load the configured TrueType font, else the first known Thai font.

    Falls back to Pillow's default bitmap font, which has no Thai glyphs.
    """
    for path in _font_candidates(font_path):
        if not path.exists():
            continue
        try:
            return ImageFont.truetype(str(path), size)
        except OSError:
            logger.warning("Could not load font %s", path)
    logger.warning("No Thai-capable font found; non-Latin card names will not render")
    return ImageFont.load_default()


def decklist_columns(snapshot: DeckSnapshot) -> list[list[Line]]:
    """Text lines of each printable column, headers flagged."""
    grouped = group_main_deck(snapshot.main_deck)
    columns: list[list[Line]] = []

    for group_names in PRINT_COLUMNS:
        lines: list[Line] = []
        for name in group_names:
            group = grouped[name]
            if not group.entries:
                continue
            lines.append((group.header(), True))
            lines.extend((f"x{entry.count} {entry.card.name}", False) for entry in group.entries)
            lines.append(("", False))
        columns.append(lines)

    life_lines: list[Line] = [(f"Life Deck ({snapshot.life_deck_total()})", True)]
    life_lines.extend((f"x1 {card.name}", False) for card in snapshot.life_deck)
    columns.append(life_lines)
    return columns


def image_filename(deck_name: str) -> str:
    return f"decklist-{safe_filename_part(deck_name, 'untitled')}.png"


def render_decklist_png(snapshot: DeckSnapshot, font_path: Path | None = None) -> bytes:
    """Draw the decklist and return PNG bytes."""
    columns = decklist_columns(snapshot)
    rows = max(len(lines) for lines in columns)

    width = PADDING * 2 + COLUMN_WIDTH * len(columns)
    height = PADDING * 2 + TITLE_HEIGHT + rows * LINE_HEIGHT + GROUP_GAP

    image = Image.new("RGB", (width, height), BACKGROUND)
    draw = ImageDraw.Draw(image)
    title_font = _load_font(font_path, 32)
    body_font = _load_font(font_path, 16)

    title = snapshot.deck_name or "Deck List"
    title_x = max(PADDING, (width - draw.textlength(title, font=title_font)) / 2)
    draw.text((title_x, PADDING), title, fill=TEXT_COLOR, font=title_font)

    top = PADDING + TITLE_HEIGHT
    for index, lines in enumerate(columns):
        x = PADDING + index * COLUMN_WIDTH
        for row, (text, is_header) in enumerate(lines):
            if not text:
                continue
            color = HEADER_COLOR if is_header else TEXT_COLOR
            draw.text((x, top + row * LINE_HEIGHT), text, fill=color, font=body_font)

    buffer = io.BytesIO()
    image.save(buffer, "PNG")
    return buffer.getvalue()


def export_decklist_image(snapshot: DeckSnapshot, font_path: Path | None = None) -> ExportedFile:
    """
    Render a deck snapshot to a downloadable PNG.

    Raises:
        ExportValidationError: If the deck name is blank
    """
    if not snapshot.deck_name.strip():
        raise ExportValidationError(
            "Enter a deck name before exporting.", ["deck name is blank"]
        )

    content = render_decklist_png(snapshot, font_path=font_path)
    filename = image_filename(snapshot.deck_name)
    logger.info("Exported decklist image %s (%d bytes)", filename, len(content))
    return ExportedFile(filename=filename, media_type=PNG_MEDIA_TYPE, content=content)
