"""
Effect lowering - gradient, shadow, border, rotation, hover and backdrop blur.

Each function returns the statement lines for one effect (an empty list when
the effect is off or the element type has no such attribute). Hover and blur
need per-frame state or shader passes, so they lower to comments only.
"""

from typing import List

from generators.base import (
    SHADOW_OPACITY, ElementBox, encode_color, format_float, format_number,
    java_color, resolve_rect,
)
from generators.dialects import DialectProfile
from generators.models import ElementBase, HoverAnimation, ProjectSettings


def fill_rect(profile: DialectProfile, box: ElementBox, color: int) -> str:
    """Flat filled rectangle over a resolved box."""
    return profile.draw.fill.format(**profile.fill_values(
        x1=box.x, y1=box.y, x2=box.x2, y2=box.y2, color=java_color(color)))


def lower_gradient(element: ElementBase, box: ElementBox, profile: DialectProfile) -> List[str]:
    gradient = getattr(element, 'gradient', None)
    if not gradient or not gradient.enabled:
        return []

    start = java_color(encode_color(gradient.start_color, element.opacity))
    end = java_color(encode_color(gradient.end_color, element.opacity))
    lines = []
    if gradient.direction == 'horizontal':
        lines.append('// Horizontal gradient: the fill call blends top to bottom; '
                     'use a custom quad for left to right')
    lines.append(profile.draw.gradient.format(**profile.fill_values(
        x1=box.x, y1=box.y, x2=box.x2, y2=box.y2, start=start, end=end)))
    return lines


def lower_shadow(element: ElementBase, box: ElementBox, profile: DialectProfile) -> List[str]:
    shadow = getattr(element, 'shadow', None)
    if not shadow or not shadow.enabled:
        return []

    color = encode_color(shadow.color, SHADOW_OPACITY)
    offset_box = box.shifted(shadow.x_offset, shadow.y_offset)
    return ['// Shadow', fill_rect(profile, offset_box, color)]


def lower_border(element: ElementBase, settings: ProjectSettings, profile: DialectProfile) -> List[str]:
    """Four strips (top, bottom, left, right); corners may be covered twice."""
    thickness = getattr(element, 'border_width', 0) or 0
    if thickness <= 0:
        return []

    color = encode_color(getattr(element, 'border_color', None), 1.0)
    x, y, w, h = element.x, element.y, element.width, element.height
    strips = [
        (x, y, w, thickness),
        (x, y + h - thickness, w, thickness),
        (x, y, thickness, h),
        (x + w - thickness, y, thickness, h),
    ]
    lines = ['// Border']
    for sx, sy, sw, sh in strips:
        lines.append(fill_rect(profile, resolve_rect(sx, sy, sw, sh, settings), color))
    return lines


def open_rotation(element: ElementBase, box: ElementBox, profile: DialectProfile) -> List[str]:
    """Push and rotate around the element center. Always paired with close_rotation."""
    if not element.rotation:
        return []

    cx, cy = box.center()
    transform = profile.transform
    return [
        transform.push,
        transform.translate.format(x=cx, y=cy),
        transform.rotate.format(degrees=format_float(element.rotation)),
        transform.translate.format(x=f"-({cx})", y=f"-({cy})"),
    ]


def close_rotation(element: ElementBase, profile: DialectProfile) -> List[str]:
    if not element.rotation:
        return []
    return [profile.transform.pop]


def describe_hover(element: ElementBase) -> List[str]:
    hover = getattr(element, 'hover', None)
    if not hover or not hover.enabled or hover.type == HoverAnimation.NONE:
        return []

    lines = [f"// Hover animation: {hover.type} over {format_number(hover.duration)}s while the cursor is inside"]
    if hover.type == HoverAnimation.SCALE:
        lines.append(f"//   scale by {format_number(hover.scale)} around the center")
    elif hover.type == HoverAnimation.LIFT:
        lines.append(f"//   move up by {format_number(hover.lift_amount)}px")
    elif hover.type == HoverAnimation.SLIDE_RIGHT:
        lines.append(f"//   move right by {format_number(hover.slide_amount)}px")
    elif hover.type == HoverAnimation.GLOW:
        lines.append(f"//   glow {hover.glow_color} with blur {format_number(hover.glow_blur)}")
    elif hover.type == HoverAnimation.BORDER_PULSE:
        lines.append(f"//   pulse the border with {hover.glow_color}")
    if hover.brightness and hover.brightness != 1:
        lines.append(f"//   brightness x{format_number(hover.brightness)}")
    lines.append("//   keep a per-element progress value and interpolate it with delta each frame")
    return lines


def describe_backdrop_blur(element: ElementBase) -> List[str]:
    radius = getattr(element, 'backdrop_blur', 0) or 0
    if radius <= 0:
        return []
    return [f"// Backdrop blur ({format_number(radius)}px) needs a blur shader pass over the background"]
