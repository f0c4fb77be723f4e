"""
Shared helpers for the Java screen generator.

Position resolution, packed ARGB color encoding, Java literal formatting and
the per-element bounding box that every lowering function consumes.
"""

import math
import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from generators.models import ElementBase, ProjectSettings


# Responsive anchoring thresholds: center ratio below NEAR anchors to the near
# edge, above FAR to the far edge, anything in [NEAR, FAR] to the middle.
NEAR_EDGE_RATIO = 0.33
FAR_EDGE_RATIO = 0.66

SHADOW_OPACITY = 0.5
DEFAULT_RGB = 0xFFFFFF

INDENT = ' ' * 8

_RGB_FUNC_RE = re.compile(r'rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)')
_SHORT_HEX_RE = re.compile(r'^[0-9a-fA-F]{3}$')
_NON_IDENTIFIER_RE = re.compile(r'[^A-Za-z0-9]+')
_NON_JAVA_IDENTIFIER_RE = re.compile(r'[^A-Za-z0-9_$]')


class Axis(str, Enum):
    X = "x"
    Y = "y"


CONTAINER_DIMENSIONS = {
    Axis.X: 'this.width',
    Axis.Y: 'this.height',
}


class DuplicateIdentifierError(ValueError):
    """Two elements would be declared as the same Java field."""

    def __init__(self, names):
        self.names = sorted(set(names))
        super().__init__(
            "Duplicate variable names: " + ', '.join(self.names)
            + ". Rename the elements so every field is unique."
        )


# ---------------------------------------------------------------------------
# Number formatting
# ---------------------------------------------------------------------------

def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (halves go towards +infinity)."""
    return int(math.floor(value + 0.5))


def format_number(value: float) -> str:
    """Shortest Java-friendly rendering: 45.0 -> '45', 0.25 -> '0.25'."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


def format_float(value: float) -> str:
    """Java float literal."""
    return f"{format_number(value)}f"


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

def resolve_position(value: float, size: float, container_size: float,
                     axis: Axis, responsive: bool) -> str:
    """Java expression for an element's near-edge coordinate.

    Responsive layouts anchor the element to whichever third of the canvas its
    center falls in, expressed against the live container dimension.
    """
    if not responsive:
        return str(round_half_up(value))

    dimension = CONTAINER_DIMENSIONS[axis]
    center = value + size / 2
    ratio = center / container_size

    if ratio < NEAR_EDGE_RATIO:
        return str(round_half_up(value))
    elif ratio > FAR_EDGE_RATIO:
        return f"{dimension} - {round_half_up(container_size - value)}"
    else:
        offset = value - container_size / 2
        sign = '+' if offset >= 0 else '-'
        return f"{dimension} / 2 {sign} {abs(round_half_up(offset))}"


def offset_expr(expr: str, delta: float) -> str:
    """Add a literal delta to an expression, folding plain integers."""
    delta = round_half_up(delta)
    if delta == 0:
        return expr
    try:
        return str(int(expr) + delta)
    except ValueError:
        pass
    if delta > 0:
        return f"{expr} + {delta}"
    return f"{expr} - {-delta}"


@dataclass(frozen=True)
class ElementBox:
    """Resolved near and far edge expressions of one element."""
    x: str
    y: str
    x2: str
    y2: str
    width: int
    height: int

    def shifted(self, dx: float, dy: float) -> 'ElementBox':
        return ElementBox(
            x=offset_expr(self.x, dx),
            y=offset_expr(self.y, dy),
            x2=offset_expr(self.x2, dx),
            y2=offset_expr(self.y2, dy),
            width=self.width,
            height=self.height,
        )

    def center(self) -> Tuple[str, str]:
        """Center point as float expressions (safe for glTranslatef)."""
        return (f"{self.x} + {self.width} / 2f", f"{self.y} + {self.height} / 2f")


def far_edge(near: str, value: float, size: float, responsive: bool) -> str:
    """Far-edge expression: near + size, literal when not responsive."""
    if responsive:
        return f"({near} + {round_half_up(size)})"
    return str(round_half_up(value + size))


def resolve_rect(x: float, y: float, width: float, height: float,
                 settings: ProjectSettings) -> ElementBox:
    """Resolve an arbitrary rectangle through the position resolver."""
    x_code = resolve_position(x, width, settings.screen_width, Axis.X, settings.responsive)
    y_code = resolve_position(y, height, settings.screen_height, Axis.Y, settings.responsive)
    return ElementBox(
        x=x_code,
        y=y_code,
        x2=far_edge(x_code, x, width, settings.responsive),
        y2=far_edge(y_code, y, height, settings.responsive),
        width=round_half_up(width),
        height=round_half_up(height),
    )


def resolve_box(element: ElementBase, settings: ProjectSettings) -> ElementBox:
    return resolve_rect(element.x, element.y, element.width, element.height, settings)


# ---------------------------------------------------------------------------
# Colors
# ---------------------------------------------------------------------------

def parse_rgb(color: Optional[str]) -> int:
    """24-bit RGB from '#RRGGBB', '#RGB' or 'rgb(a)(...)'. Missing -> white, garbage -> black."""
    if not color:
        return DEFAULT_RGB
    text = color.strip()
    match = _RGB_FUNC_RE.match(text)
    if match:
        r, g, b = (min(int(c), 255) for c in match.groups())
        return (r << 16) | (g << 8) | b
    text = text.lstrip('#')
    if _SHORT_HEX_RE.match(text):
        text = ''.join(ch * 2 for ch in text)
    try:
        return int(text, 16) & 0xFFFFFF
    except ValueError:
        return 0


def encode_color(color: Optional[str] = None, opacity: Optional[float] = 1) -> int:
    """Pack a color and opacity into the platform's unsigned ARGB integer."""
    if opacity is None:
        opacity = 1
    alpha = math.floor(opacity * 255)
    return ((alpha << 24) | parse_rgb(color)) & 0xFFFFFFFF


def java_color(value: int) -> str:
    """Packed color as a Java int literal."""
    return f"0x{value & 0xFFFFFFFF:08X}"


def text_color(color: Optional[str]) -> str:
    """24-bit text color literal (text renderers treat alpha 0 as opaque)."""
    return f"0x{parse_rgb(color):06X}"


# ---------------------------------------------------------------------------
# Java text
# ---------------------------------------------------------------------------

def java_string(text: Optional[str]) -> str:
    """Escape text for use inside a Java string literal (quotes not included)."""
    if not text:
        return ''
    return (text.replace('\\', '\\\\')
                .replace('"', '\\"')
                .replace('\n', '\\n')
                .replace('\r', '\\r')
                .replace('\t', '\\t'))


def indent_lines(lines) -> str:
    """Join statement lines at method-body indentation."""
    return "\n".join(f"{INDENT}{line}" if line else "" for line in lines)


def constant_name(value: str) -> str:
    """Java constant form: 'ui.button.click' -> 'UI_BUTTON_CLICK'."""
    return _NON_IDENTIFIER_RE.sub('_', value).upper()


JAVA_KEYWORDS = frozenset({
    'abstract', 'assert', 'boolean', 'break', 'byte', 'case', 'catch', 'char',
    'class', 'const', 'continue', 'default', 'do', 'double', 'else', 'enum',
    'extends', 'false', 'final', 'finally', 'float', 'for', 'goto', 'if',
    'implements', 'import', 'instanceof', 'int', 'interface', 'long', 'native',
    'new', 'null', 'package', 'private', 'protected', 'public', 'return',
    'short', 'static', 'strictfp', 'super', 'switch', 'synchronized', 'this',
    'throw', 'throws', 'transient', 'true', 'try', 'void', 'volatile', 'while',
})


def java_identifier(name: Optional[str], fallback: str) -> str:
    """Usable Java field name: blank -> fallback, invalid characters -> '_'."""
    name = (name or '').strip()
    if not name:
        return fallback
    name = _NON_JAVA_IDENTIFIER_RE.sub('_', name)
    if name[0].isdigit() or name in JAVA_KEYWORDS:
        name = f"_{name}"
    return name
