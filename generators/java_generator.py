"""
Java Screen Code Generator - one screen document to one compilation unit.

Pipeline: resolve the dialect profile, then emit imports, annotation and class
header, field declarations, constructor, init() and render() in that fixed
order. Elements are visited in document order; each element's box is resolved
once and handed to every lowering function.
"""

import logging
from collections import Counter
from typing import Any, Dict, Iterable, List, Optional, Sequence, Union

from generators.actions import ActionContext, attach_event
from generators.base import (
    DuplicateIdentifierError, ElementBox, constant_name, encode_color,
    format_number, indent_lines, java_color, java_identifier, java_string, offset_expr,
    resolve_box, round_half_up, text_color,
)
from generators.dialects import DialectProfile, resolve_dialect
from generators.effects import (
    close_rotation, describe_backdrop_blur, describe_hover, fill_rect,
    lower_border, lower_gradient, lower_shadow, open_rotation,
)
from generators.models import (
    ElementBase, ElementType, EventType, ProjectSettings, Screen, ScreenRef,
    UnknownElement, parse_elements,
)
from generators.templates import expand

logger = logging.getLogger(__name__)

MEMBER_INDENT = ' ' * 4

# Fixed palette for parts the document gives no color for
TRACK_COLOR = 0xFF555555
KNOB_COLOR = 0xFFC6C6C6
CHECKBOX_COLOR = 0xFF8B8B8B
CHECK_MARK_COLOR = 0xFFFFFFFF
DROPDOWN_COLOR = '#000000'

# Glyph height of the default font
FONT_HEIGHT = 8

INTERACTIVE_TYPES = (
    ElementType.BUTTON, ElementType.TEXT_FIELD, ElementType.CHECKBOX,
    ElementType.SLIDER, ElementType.DROPDOWN,
)

ScreenLike = Union[ScreenRef, Screen, Dict[str, Any]]


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def generate_java_code(
    elements: Iterable[Union[ElementBase, Dict[str, Any]]],
    settings: Union[ProjectSettings, Dict[str, Any]],
    screens: Optional[Sequence[ScreenLike]] = None,
) -> str:
    """Generate the Java screen class for one canvas.

    Args:
        elements: Elements in document order (typed models or raw editor dicts).
        settings: The screen's ProjectSettings (model or dict).
        screens: Sibling screens for OPEN_SCREEN resolution.

    Returns:
        str: Complete Java source for the screen class.

    Raises:
        DuplicateIdentifierError: Two elements would be declared as the same field.
    """
    if not isinstance(settings, ProjectSettings):
        settings = ProjectSettings.model_validate(settings or {})
    elements = [el for el in parse_elements(list(elements or [])) if not isinstance(el, UnknownElement)]
    elements = [_named(el, index) for index, el in enumerate(elements)]
    profile = resolve_dialect(settings.loader, settings.version)
    context = ActionContext(profile, tuple(_screen_ref(s) for s in screens or ()))

    logger.debug("Generating %s for %s %s (%s family, %d elements)",
                 settings.class_name, settings.loader.value, settings.version.value,
                 profile.family.value, len(elements))

    check_identifiers(elements, profile)
    boxes = [resolve_box(el, settings) for el in elements]

    sections = [
        '\n'.join(f"import {name};" for name in profile.imports),
        _class_header(settings, profile),
        _field_block(elements, profile),
        _constructor(settings, profile),
        _init_method(elements, boxes, context),
        _render_method(elements, boxes, settings, profile),
    ]
    return '\n\n'.join(section for section in sections if section) + '\n}\n'


def check_identifiers(elements: Sequence[ElementBase], profile: DialectProfile) -> None:
    """Fail when two elements would become the same Java field."""
    names = Counter(el.variable_name for el in elements if _has_field(el, profile))
    duplicates = [name for name, count in names.items() if count > 1]
    if duplicates:
        raise DuplicateIdentifierError(duplicates)


def _named(element: ElementBase, index: int) -> ElementBase:
    """Element with a usable Java identifier; unnamed elements become element<index>."""
    name = java_identifier(element.variable_name, f"element{index}")
    if name == element.variable_name:
        return element
    return element.model_copy(update={'variable_name': name})


def _screen_ref(screen: ScreenLike) -> ScreenRef:
    if isinstance(screen, ScreenRef):
        return screen
    if isinstance(screen, Screen):
        return screen.ref()
    return ScreenRef.model_validate(screen)


def _has_field(element: ElementBase, profile: DialectProfile) -> bool:
    return profile.needs_field(element.type) and profile.widget_class(element.type) is not None


# ---------------------------------------------------------------------------
# Class skeleton
# ---------------------------------------------------------------------------

def _class_header(settings: ProjectSettings, profile: DialectProfile) -> str:
    header = f"public class {settings.class_name} extends {profile.base_class} {{"
    if profile.annotation:
        return f"{profile.annotation}\n{header}"
    return header


def _field_block(elements: Sequence[ElementBase], profile: DialectProfile) -> str:
    return '\n'.join(
        f"{MEMBER_INDENT}private {profile.widget_class(el.type)} {el.variable_name};"
        for el in elements if _has_field(el, profile)
    )


def _constructor(settings: ProjectSettings, profile: DialectProfile) -> str:
    call = profile.constructor_super.format(title=java_string(settings.class_name))
    return f"{MEMBER_INDENT}public {settings.class_name}() {{ {call} }}"


def _method(signature: str, body: List[str]) -> str:
    return '\n'.join([
        f"{MEMBER_INDENT}@Override",
        f"{MEMBER_INDENT}{signature} {{",
        indent_lines(body),
        f"{MEMBER_INDENT}}}",
    ])


def _join_groups(groups: Iterable[List[str]]) -> List[str]:
    """Concatenate statement groups with a blank line between them."""
    lines: List[str] = []
    for group in groups:
        if not group:
            continue
        if lines:
            lines.append('')
        lines.extend(group)
    return lines


# ---------------------------------------------------------------------------
# init()
# ---------------------------------------------------------------------------

def _init_method(elements: Sequence[ElementBase], boxes: Sequence[ElementBox], context: ActionContext) -> str:
    profile = context.profile
    groups = [_init_element(index, el, box, context) for index, (el, box) in enumerate(zip(elements, boxes))]
    body = [profile.super_init]
    element_lines = _join_groups(groups)
    if element_lines:
        body += [''] + element_lines
    return _method(profile.init_signature, body)


def _unhooked(profile: DialectProfile, event_type: EventType, statement: str) -> List[str]:
    """Comment out an action the dialect has nowhere to attach."""
    if not statement:
        return []
    first, *rest = statement.splitlines() or ['']
    lines = [profile.widgets.unhooked.format(event=event_type.value, statement=first)]
    lines.extend(f"//   {line}" for line in rest)
    return lines


def _init_element(index: int, element: ElementBase, box: ElementBox, context: ActionContext) -> List[str]:
    if element.type not in INTERACTIVE_TYPES:
        return []

    profile = context.profile
    widgets = profile.widgets
    on_click = attach_event(element, EventType.ON_CLICK, context)
    on_change = attach_event(element, EventType.ON_CHANGE, context)
    values = profile.fill_values(
        name=element.variable_name, id=index,
        x=box.x, y=box.y, w=box.width, h=box.height,
        label=java_string(getattr(element, 'label', '')),
    )

    if element.type == ElementType.BUTTON:
        if '{body}' in ''.join(widgets.button):
            return expand(widgets.button, on_click.splitlines(), **values)
        return expand(widgets.button, **values) + _unhooked(profile, EventType.ON_CLICK, on_click)

    if element.type == ElementType.TEXT_FIELD:
        lines = expand(widgets.text_field, **values)
        if on_change and widgets.text_field_listener:
            lines += expand(widgets.text_field_listener, on_change.splitlines(), **values)
        else:
            lines += _unhooked(profile, EventType.ON_CHANGE, on_change)
        return lines

    if element.type == ElementType.CHECKBOX:
        action = on_change or on_click
        event = EventType.ON_CHANGE if on_change else EventType.ON_CLICK
        template = widgets.checkbox if profile.widget_class(element.type) else None
        if template is None:
            return _unhooked(profile, event, action)
        values['checked'] = 'true' if element.checked else 'false'
        if '{body}' in ''.join(template):
            return expand(template, action.splitlines(), **values)
        return expand(template, **values) + _unhooked(profile, event, action)

    if element.type == ElementType.SLIDER:
        template = widgets.slider if profile.widget_class(element.type) else None
        if template is None:
            return _unhooked(profile, EventType.ON_CHANGE, on_change)
        values.update(
            start=format_number(element.value),
            initial=format_number(_slider_fraction(element)),
            min=format_number(element.min_value),
            span=format_number(element.max_value - element.min_value),
        )
        return expand(template, on_change.splitlines(), **values)

    # Dropdowns are drawn by hand in every dialect
    return _unhooked(profile, EventType.ON_CHANGE, on_change) + _unhooked(profile, EventType.ON_CLICK, on_click)


def _slider_fraction(element) -> float:
    span = element.max_value - element.min_value
    if span == 0:
        return 0.0
    return min(1.0, max(0.0, (element.value - element.min_value) / span))


# ---------------------------------------------------------------------------
# render()
# ---------------------------------------------------------------------------

def _render_method(elements: Sequence[ElementBase], boxes: Sequence[ElementBox],
                   settings: ProjectSettings, profile: DialectProfile) -> str:
    body = [profile.background_call]
    if settings.background_color:
        screen_box = ElementBox('0', '0', 'this.width', 'this.height', settings.screen_width, settings.screen_height)
        body.append(fill_rect(profile, screen_box, encode_color(settings.background_color, 1.0)))
    body.append(profile.super_render)

    element_lines = _join_groups(
        _render_element(el, box, settings, profile) for el, box in zip(elements, boxes)
    )
    if element_lines:
        body += [''] + element_lines
    return _method(profile.render_signature, body)


def _render_element(element: ElementBase, box: ElementBox, settings: ProjectSettings,
                    profile: DialectProfile) -> List[str]:
    """Statement group: rotation open, shadow, notes, body, tooltip, border, rotation close."""
    inner = (
        lower_shadow(element, box, profile)
        + describe_hover(element)
        + describe_backdrop_blur(element)
        + _render_body(element, box, profile)
        + _tooltip(element, box, profile)
        + lower_border(element, settings, profile)
    )
    rotation_open = open_rotation(element, box, profile)
    if not inner and not rotation_open:
        return []
    return rotation_open + inner + close_rotation(element, profile)


def _tooltip(element: ElementBase, box: ElementBox, profile: DialectProfile) -> List[str]:
    if not element.tooltip:
        return []
    draw = profile.draw.tooltip.format(**profile.fill_values(text=java_string(element.tooltip)))
    return [
        f"if (mouseX >= {box.x} && mouseX <= {box.x2} && mouseY >= {box.y} && mouseY <= {box.y2}) {{",
        f"    {draw}",
        "}",
    ]


def _text(profile: DialectProfile, text: str, x: str, y: str, color: str, shadow: bool = False) -> str:
    template = profile.draw.text_shadowed if shadow else profile.draw.text
    return template.format(**profile.fill_values(text=java_string(text), x=x, y=y, color=color))


def _text_y(box: ElementBox) -> str:
    """Vertically centered baseline for one line of text inside the box."""
    return offset_expr(box.y, max(0, (box.height - FONT_HEIGHT) // 2))


def _surface(element: ElementBase, box: ElementBox, profile: DialectProfile) -> List[str]:
    """Gradient when enabled, flat fill otherwise."""
    gradient = lower_gradient(element, box, profile)
    if gradient:
        return gradient
    return [fill_rect(profile, box, encode_color(getattr(element, 'color', None), element.opacity))]


def _render_body(element: ElementBase, box: ElementBox, profile: DialectProfile) -> List[str]:
    kind = element.type

    if kind in (ElementType.PANEL, ElementType.SLOT):
        return _surface(element, box, profile)

    if kind == ElementType.BUTTON:
        return lower_gradient(element, box, profile)

    if kind == ElementType.LABEL:
        return [_label(element, box, profile)]

    if kind == ElementType.TEXT_FIELD:
        if profile.draw.text_box and profile.widget_class(kind):
            return [profile.draw.text_box.format(name=element.variable_name)]
        return []

    if kind == ElementType.CHECKBOX and profile.widget_class(kind) is None:
        return _manual_checkbox(element, box, profile)

    if kind == ElementType.SLIDER and profile.widget_class(kind) is None:
        return _manual_slider(element, box, profile)

    if kind == ElementType.DROPDOWN:
        return _dropdown(element, box, profile)

    if kind == ElementType.SCROLL_PANEL:
        values = profile.fill_values(x1=box.x, y1=box.y, x2=box.x2, y2=box.y2)
        return _surface(element, box, profile) + [
            '// Scroll panel',
            profile.draw.scissor_open.format(**values),
            '// Render scrollable content here',
            profile.draw.scissor_close.format(**values),
        ]

    if kind == ElementType.IMAGE:
        if not element.texture_path:
            return _surface(element, box, profile)
        values = profile.fill_values(path=java_string(element.texture_path),
                                     x=box.x, y=box.y, w=box.width, h=box.height)
        return [line.format(**values) for line in profile.draw.texture]

    if kind == ElementType.ENTITY:
        size = round_half_up(min(box.width, box.height) / 2 * element.scale)
        return [
            f"// Entity: {element.entity_type}",
            profile.draw.entity.format(**profile.fill_values(
                x=offset_expr(box.x, box.width // 2),
                y=offset_expr(box.y, box.height - 5),
                size=size,
                entity=element.entity_type,
            )),
        ]

    if kind == ElementType.ITEM:
        item = element.item_id or 'stone'
        return [
            f"// Item: {item}",
            profile.draw.item.format(**profile.fill_values(
                item=constant_name(item.split(':')[-1]), x=box.x, y=box.y)),
        ]

    if kind == ElementType.PROGRESS_BAR:
        progress = min(100.0, max(0.0, element.progress or 0))
        filled = round_half_up(box.width * progress / 100.0)
        lines = [fill_rect(profile, box, TRACK_COLOR)]
        if filled > 0:
            bar = ElementBox(box.x, box.y, offset_expr(box.x, filled), box.y2, filled, box.height)
            lines.append(fill_rect(profile, bar, encode_color(element.color, element.opacity)))
        return lines

    return []


def _label(element, box: ElementBox, profile: DialectProfile) -> str:
    text = java_string(element.label)
    width = profile.draw.text_width.format(**profile.fill_values(text=text))
    if element.text_align == 'center':
        x = f"{box.x} + ({box.width} - {width}) / 2"
    elif element.text_align == 'right':
        x = f"{box.x2} - {width}"
    else:
        x = box.x
    return _text(profile, element.label, x, box.y, text_color(element.color), element.text_shadow)


def _manual_checkbox(element, box: ElementBox, profile: DialectProfile) -> List[str]:
    lines = [
        f"// Checkbox: {element.variable_name} (no widget class in this version)",
        fill_rect(profile, box, CHECKBOX_COLOR),
    ]
    if element.checked:
        mark = ElementBox(offset_expr(box.x, 3), offset_expr(box.y, 3),
                          offset_expr(box.x2, -3), offset_expr(box.y2, -3),
                          box.width - 6, box.height - 6)
        lines.append(fill_rect(profile, mark, CHECK_MARK_COLOR))
    if element.label:
        lines.append(_text(profile, element.label, offset_expr(box.x2, 4), _text_y(box),
                           text_color(None), element.text_shadow))
    return lines


def _manual_slider(element, box: ElementBox, profile: DialectProfile) -> List[str]:
    knob_width = 8
    knob_x = offset_expr(box.x, round_half_up((box.width - knob_width) * _slider_fraction(element)))
    knob = ElementBox(knob_x, box.y, offset_expr(knob_x, knob_width), box.y2, knob_width, box.height)
    caption = f"{element.label}: {format_number(element.value)}" if element.label else format_number(element.value)
    return [
        f"// Slider: {element.variable_name} (no widget class in this version)",
        fill_rect(profile, box, TRACK_COLOR),
        fill_rect(profile, knob, KNOB_COLOR),
        _text(profile, caption, offset_expr(box.x, 4), _text_y(box), text_color(None), element.text_shadow),
    ]


def _dropdown(element, box: ElementBox, profile: DialectProfile) -> List[str]:
    lines = [f"// Dropdown: {element.label}"]
    if element.options:
        lines.append('// Options: ' + ', '.join(f'"{java_string(option)}"' for option in element.options))
    lines.append(fill_rect(profile, box, encode_color(element.color or DROPDOWN_COLOR, element.opacity)))
    text_y = _text_y(box)
    lines.append(_text(profile, element.label, offset_expr(box.x, 4), text_y, text_color(None)))
    lines.append(_text(profile, 'v', offset_expr(box.x2, -10), text_y, text_color(None)))
    return lines
