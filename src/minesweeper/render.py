"""
Text rendering of a game in progress.

Reads engine state only; used by the console game and the
environment's ansi render mode.
"""
from .board import clamp
from .engine import Face, GameEngine
from .tile import OBS_DETONATED, OBS_FLAGGED, OBS_HIDDEN, OBS_MINE, OBS_WRONG_FLAG, Tile


GLYPHS = {
    OBS_HIDDEN: "#",
    OBS_FLAGGED: "F",
    OBS_MINE: "*",
    OBS_DETONATED: "X",
    OBS_WRONG_FLAG: "x",
    0: ".",
}

FACES = {
    Face.NORMAL: ":)",
    Face.PRESSING: ":o",
    Face.LOST: "X(",
    Face.WON: "B)",
}


def format_counter(number: float) -> str:
    """Three-digit counter display, clamped to 000-999."""
    return f"{clamp(int(number), 0, 999):03d}"


def tile_glyph(tile: Tile, pressed: bool = False) -> str:
    """Single character for a tile; pressed tiles look opened and blank."""
    if pressed:
        return GLYPHS[0]
    code = tile.to_observation()
    return GLYPHS.get(code, str(code))


def render_text(engine: GameEngine) -> str:
    """
    Render the status line and grid as text.

    The status line shows mines remaining, the face and elapsed
    seconds. Columns and rows are labelled so coordinates can be
    read off directly.
    """
    board = engine.board
    pressed = set(engine.pressed_tiles())

    header = (
        f"{format_counter(engine.mines_remaining)}  "
        f"{FACES[engine.face]}  "
        f"{format_counter(engine.elapsed_seconds)}"
    )
    lines = [header, ""]
    lines.append("    " + " ".join(f"{x % 10}" for x in range(board.width)))
    for y in range(board.height):
        row = " ".join(
            tile_glyph(board.get_tile(x, y), board.get_tile(x, y) in pressed)
            for x in range(board.width)
        )
        lines.append(f"{y:>2}  {row}")
    return "\n".join(lines)
