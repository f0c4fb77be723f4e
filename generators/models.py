"""
Screen document model - the in-memory layout the editor produces.

Every element type is its own pydantic model composed from capability mixins,
so which attributes exist for which type is decided at construction time.
Fields that do not belong to a type are dropped silently (pydantic's default
``extra='ignore'``), and every optional attribute has a default, which keeps
generation total over partial documents.
"""

from enum import Enum
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel


# ============================================================================
# Enums
# ============================================================================

class ElementType(str, Enum):
    """Widget kinds the editor can place on a canvas."""
    BUTTON = "BUTTON"
    LABEL = "LABEL"
    TEXT_FIELD = "TEXT_FIELD"
    PANEL = "PANEL"
    SCROLL_PANEL = "SCROLL_PANEL"
    SLOT = "SLOT"
    CHECKBOX = "CHECKBOX"
    SLIDER = "SLIDER"
    DROPDOWN = "DROPDOWN"
    IMAGE = "IMAGE"
    ENTITY = "ENTITY"
    ITEM = "ITEM"
    PROGRESS_BAR = "PROGRESS_BAR"


class ModLoader(str, Enum):
    """Target platform."""
    FABRIC = "Fabric"
    FORGE = "Forge"
    NEOFORGE = "NeoForge"
    QUILT = "Quilt"
    LWJGL2 = "Client (LWJGL 2)"


class McVersion(str, Enum):
    """Target game version."""
    V1_21 = "1.21"
    V1_20_4 = "1.20.4"
    V1_19_4 = "1.19.4"
    V1_18_2 = "1.18.2"
    V1_16_5 = "1.16.5"
    V1_12_2 = "1.12.2"
    V1_8_9 = "1.8.9"


class EventType(str, Enum):
    ON_CLICK = "ON_CLICK"
    ON_CHANGE = "ON_CHANGE"


class ActionType(str, Enum):
    OPEN_SCREEN = "OPEN_SCREEN"
    EXECUTE_COMMAND = "EXECUTE_COMMAND"
    PLAY_SOUND = "PLAY_SOUND"
    CUSTOM_CODE = "CUSTOM_CODE"


class HoverAnimation(str, Enum):
    NONE = "NONE"
    SCALE = "SCALE"
    LIFT = "LIFT"
    SLIDE_RIGHT = "SLIDE_RIGHT"
    GLOW = "GLOW"
    BORDER_PULSE = "BORDER_PULSE"


# ============================================================================
# Shared records
# ============================================================================

class DocumentModel(BaseModel):
    """Base for persisted records: camelCase on the wire, immutable in memory.

    Explicit nulls are treated like missing keys, so every field falls back
    to its default instead of failing validation.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )

    @model_validator(mode='before')
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ProjectSettings(DocumentModel):
    """Per-screen generation settings."""
    loader: ModLoader = ModLoader.FABRIC
    version: McVersion = McVersion.V1_20_4
    class_name: str = "MyCustomScreen"
    screen_width: int = Field(default=427, gt=0)
    screen_height: int = Field(default=240, gt=0)
    responsive: bool = False
    background_color: Optional[str] = None

    @field_validator('class_name')
    @classmethod
    def strip_class_name(cls, v: str) -> str:
        return v.strip() or "MyCustomScreen"


class GradientConfig(DocumentModel):
    enabled: bool = False
    start_color: str = "#3c3c3c"
    end_color: str = "#2b2b2b"
    direction: str = 'vertical'


class ShadowConfig(DocumentModel):
    enabled: bool = False
    color: str = "#000000"
    x_offset: float = 2
    y_offset: float = 2
    blur: float = 0


class HoverConfig(DocumentModel):
    enabled: bool = False
    type: str = HoverAnimation.NONE.value
    duration: float = 0.2
    scale: float = 1.05
    lift_amount: float = 2
    slide_amount: float = 0
    glow_color: str = "#ffffff"
    glow_blur: float = 10
    brightness: float = 1.0


class EventAction(DocumentModel):
    """Declarative behavior; unknown kinds are kept and lowered to nothing."""
    type: Optional[str] = None
    value: str = ""


class ScreenRef(DocumentModel):
    """The slice of a sibling screen needed to resolve OPEN_SCREEN targets."""
    id: str
    class_name: str

    @model_validator(mode='before')
    @classmethod
    def flatten_settings(cls, data: Any) -> Any:
        # The editor hands over {id, settings: {className}}
        if isinstance(data, dict) and 'settings' in data and 'className' not in data:
            settings = data.get('settings') or {}
            class_name = settings.get('className') or settings.get('class_name') or data.get('id', '')
            return {'id': data.get('id', ''), 'class_name': class_name}
        return data


# ============================================================================
# Element capability mixins
# ============================================================================

class ElementBase(DocumentModel):
    """Attributes every element carries."""
    id: str = ""
    x: float = 0
    y: float = 0
    width: float = 0
    height: float = 0
    rotation: float = 0
    variable_name: str = ""
    opacity: Optional[float] = None
    tooltip: Optional[str] = None
    events: Dict[str, EventAction] = Field(default_factory=dict)

    @field_validator('events', mode='before')
    @classmethod
    def drop_empty_events(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {key: action for key, action in v.items() if action is not None}
        return v

    @field_validator('rotation')
    @classmethod
    def wrap_rotation(cls, v: float) -> float:
        return v % 360

    def event(self, event_type: EventType) -> Optional[EventAction]:
        return self.events.get(event_type.value)


class Filled(BaseModel):
    color: Optional[str] = None
    border_radius: float = 0


class Bordered(BaseModel):
    border_color: Optional[str] = None
    border_width: float = 0


class Textual(BaseModel):
    label: str = ""
    font_family: str = 'Minecraft'
    text_align: str = 'left'
    text_shadow: bool = True


class Gradiented(BaseModel):
    gradient: Optional[GradientConfig] = None


class Shadowed(BaseModel):
    shadow: Optional[ShadowConfig] = None


class Hoverable(BaseModel):
    hover: Optional[HoverConfig] = None


class Blurred(BaseModel):
    backdrop_blur: float = 0


# ============================================================================
# Element types
# ============================================================================

class Button(ElementBase, Filled, Bordered, Textual, Gradiented, Shadowed, Hoverable):
    type: Literal['BUTTON'] = 'BUTTON'
    text_align: str = 'center'
    variant: str = "DEFAULT"


class Label(ElementBase, Textual):
    type: Literal['LABEL'] = 'LABEL'
    color: Optional[str] = None


class TextField(ElementBase, Filled, Bordered, Textual):
    type: Literal['TEXT_FIELD'] = 'TEXT_FIELD'


class Panel(ElementBase, Filled, Bordered, Gradiented, Shadowed, Hoverable, Blurred):
    type: Literal['PANEL'] = 'PANEL'


class ScrollPanel(ElementBase, Filled, Bordered, Shadowed, Blurred):
    type: Literal['SCROLL_PANEL'] = 'SCROLL_PANEL'


class Slot(ElementBase, Filled, Bordered):
    type: Literal['SLOT'] = 'SLOT'


class Checkbox(ElementBase, Textual):
    type: Literal['CHECKBOX'] = 'CHECKBOX'
    checked: bool = False
    variant: str = "DEFAULT"


class Slider(ElementBase, Textual):
    type: Literal['SLIDER'] = 'SLIDER'
    min_value: float = Field(default=0, alias='min')
    max_value: float = Field(default=100, alias='max')
    value: float = 50
    step: float = 1


class Dropdown(ElementBase, Filled, Bordered, Textual):
    type: Literal['DROPDOWN'] = 'DROPDOWN'
    options: List[str] = Field(default_factory=list)


class Image(ElementBase, Filled, Bordered):
    type: Literal['IMAGE'] = 'IMAGE'
    texture_path: Optional[str] = None


class Entity(ElementBase):
    type: Literal['ENTITY'] = 'ENTITY'
    entity_type: str = "zombie"
    scale: float = 1


class Item(ElementBase):
    type: Literal['ITEM'] = 'ITEM'
    item_id: str = "stone"
    scale: float = 1


class ProgressBar(ElementBase, Filled, Bordered):
    type: Literal['PROGRESS_BAR'] = 'PROGRESS_BAR'
    progress: float = 0


class UnknownElement(ElementBase):
    """Placeholder for a type tag this generator does not know; renders nothing."""
    type: str = ""


GuiElement = Union[
    Button, Label, TextField, Panel, ScrollPanel, Slot, Checkbox, Slider,
    Dropdown, Image, Entity, Item, ProgressBar, UnknownElement,
]

ELEMENT_MODELS: Dict[ElementType, type] = {
    ElementType.BUTTON: Button,
    ElementType.LABEL: Label,
    ElementType.TEXT_FIELD: TextField,
    ElementType.PANEL: Panel,
    ElementType.SCROLL_PANEL: ScrollPanel,
    ElementType.SLOT: Slot,
    ElementType.CHECKBOX: Checkbox,
    ElementType.SLIDER: Slider,
    ElementType.DROPDOWN: Dropdown,
    ElementType.IMAGE: Image,
    ElementType.ENTITY: Entity,
    ElementType.ITEM: Item,
    ElementType.PROGRESS_BAR: ProgressBar,
}


def parse_element(data: Union[Dict[str, Any], ElementBase]) -> ElementBase:
    """Build the typed element for a raw editor record, dispatching on its type tag."""
    if isinstance(data, ElementBase):
        return data
    tag = data.get('type', '')
    try:
        model = ELEMENT_MODELS[ElementType(tag)]
    except ValueError:
        return UnknownElement.model_validate(data)
    return model.model_validate(data)


def parse_elements(items: List[Union[Dict[str, Any], ElementBase]]) -> List[ElementBase]:
    """Parse a list of elements, keeping document (z-)order."""
    return [parse_element(item) for item in items]


class Screen(DocumentModel):
    """A named canvas as persisted by the editor."""
    id: str
    name: str = "Main Screen"
    elements: List[Dict[str, Any]] = Field(default_factory=list)
    settings: ProjectSettings = Field(default_factory=ProjectSettings)

    def typed_elements(self) -> List[ElementBase]:
        return parse_elements(self.elements)

    def ref(self) -> ScreenRef:
        return ScreenRef(id=self.id, class_name=self.settings.class_name)
