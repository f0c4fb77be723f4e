"""
Event action lowering - declarative {type, value} pairs to Java statements.

Lowering never raises: unknown or missing action kinds produce an empty
statement, and OPEN_SCREEN targets that no longer exist fall back to the raw
stored value.
"""

from dataclasses import dataclass, field
from typing import Optional, Sequence

from generators.base import constant_name, java_string
from generators.dialects import DialectProfile
from generators.models import ActionType, ElementBase, EventAction, EventType, ScreenRef


@dataclass(frozen=True)
class ActionContext:
    """Dialect plus the read-only sibling screen set used for cross references."""
    profile: DialectProfile
    screens: Sequence[ScreenRef] = field(default_factory=tuple)

    def screen_class(self, screen_id: str) -> Optional[str]:
        for screen in self.screens:
            if screen.id == screen_id:
                return screen.class_name
        return None


def sound_identifier(value: str) -> str:
    """Sound ids become SoundEvents constants, e.g. ui.button.click -> UI_BUTTON_CLICK."""
    return constant_name(value)


def strip_command(value: str) -> str:
    return value[1:] if value.startswith('/') else value


def lower_action(action: Optional[EventAction], context: ActionContext) -> str:
    if action is None or not action.type:
        return ''

    profile = context.profile
    templates = profile.actions
    value = action.value or ''
    if not value.strip():
        return ''

    if action.type == ActionType.OPEN_SCREEN:
        screen = context.screen_class(value) or value
        return templates.open_screen.format(**profile.fill_values(screen=screen))
    if action.type == ActionType.EXECUTE_COMMAND:
        command = java_string(strip_command(value.strip()))
        if not command:
            return ''
        return profile.command_template.format(**profile.fill_values(command=command))
    if action.type == ActionType.PLAY_SOUND:
        return templates.play_sound.format(**profile.fill_values(sound=sound_identifier(value)))
    if action.type == ActionType.CUSTOM_CODE:
        return value
    return ''


def attach_event(element: ElementBase, event_type: EventType, context: ActionContext) -> str:
    """Lowered statement for one of the element's events, or ''."""
    return lower_action(element.event(event_type), context)
