"""
Dialect Profile Selector - (loader, version) -> everything that differs per target.

Family and transform style are read from tables keyed by (loader, version);
the remaining facts are derived once here so no lowering function ever has to
branch on loader or version itself.
"""

from dataclasses import dataclass, field
from functools import lru_cache
from types import MappingProxyType
from typing import Dict, FrozenSet, Mapping, Optional, Tuple, Union

from generators.models import ElementType, McVersion, ModLoader
from generators.templates import (
    ACTION_TEMPLATES, DRAW_TEMPLATES, TRANSFORM_TEMPLATES, WIDGET_TEMPLATES,
    ActionTemplates, DialectFamily, DrawTemplates, TransformStyle,
    TransformTemplates, WidgetTemplates,
)


# ============================================================================
# Tables
# ============================================================================

VERSION_FAMILY: Dict[McVersion, DialectFamily] = {
    McVersion.V1_21: DialectFamily.MODERN,
    McVersion.V1_20_4: DialectFamily.MODERN,
    McVersion.V1_19_4: DialectFamily.MID_MODERN,
    McVersion.V1_18_2: DialectFamily.MID_MODERN,
    McVersion.V1_16_5: DialectFamily.MID_MODERN,
    McVersion.V1_12_2: DialectFamily.LEGACY,
    McVersion.V1_8_9: DialectFamily.LEGACY,
}

FAMILY_TABLE: Dict[Tuple[ModLoader, McVersion], DialectFamily] = {
    (loader, version): (
        DialectFamily.BARE_CLIENT if loader == ModLoader.LWJGL2 else VERSION_FAMILY[version]
    )
    for loader in ModLoader
    for version in McVersion
}

FABRIC_LIKE = frozenset({ModLoader.FABRIC, ModLoader.QUILT})

# Versions whose client player exposes sendChatCommand
CHAT_COMMAND_VERSIONS = frozenset({McVersion.V1_19_4, McVersion.V1_20_4, McVersion.V1_21})

# Versions before addDrawableChild existed
ADD_BUTTON_VERSIONS = frozenset({McVersion.V1_16_5})


def _transform_style(loader: ModLoader, version: McVersion, family: DialectFamily) -> TransformStyle:
    if family == DialectFamily.MODERN:
        return TransformStyle.DRAW_CONTEXT
    if family == DialectFamily.MID_MODERN:
        return TransformStyle.MATRIX_STACK if loader in FABRIC_LIKE else TransformStyle.POSE_STACK
    if family == DialectFamily.LEGACY and version == McVersion.V1_12_2:
        return TransformStyle.GL_STATE_MANAGER
    return TransformStyle.GL11


TRANSFORM_TABLE: Dict[Tuple[ModLoader, McVersion], TransformStyle] = {
    key: _transform_style(key[0], key[1], family)
    for key, family in FAMILY_TABLE.items()
}

FIELD_TYPES: Dict[DialectFamily, FrozenSet[ElementType]] = {
    DialectFamily.LEGACY: frozenset({ElementType.BUTTON, ElementType.TEXT_FIELD}),
    DialectFamily.BARE_CLIENT: frozenset({ElementType.BUTTON, ElementType.TEXT_FIELD}),
    DialectFamily.MID_MODERN: frozenset({ElementType.TEXT_FIELD, ElementType.CHECKBOX, ElementType.SLIDER}),
    DialectFamily.MODERN: frozenset({ElementType.TEXT_FIELD, ElementType.CHECKBOX, ElementType.SLIDER}),
}

_LEGACY_WIDGET_CLASSES = {
    ElementType.BUTTON: 'GuiButton',
    ElementType.TEXT_FIELD: 'GuiTextField',
}

_MODERN_WIDGET_CLASSES = {
    ElementType.BUTTON: 'ButtonWidget',
    ElementType.TEXT_FIELD: 'TextFieldWidget',
    ElementType.CHECKBOX: 'CheckboxWidget',
    ElementType.SLIDER: 'SliderWidget',
}

WIDGET_CLASSES: Dict[DialectFamily, Dict[ElementType, str]] = {
    DialectFamily.LEGACY: _LEGACY_WIDGET_CLASSES,
    DialectFamily.BARE_CLIENT: _LEGACY_WIDGET_CLASSES,
    DialectFamily.MID_MODERN: _MODERN_WIDGET_CLASSES,
    DialectFamily.MODERN: _MODERN_WIDGET_CLASSES,
}

_MODERN_COMMON_IMPORTS = (
    'net.minecraft.client.MinecraftClient',
    'net.minecraft.client.gui.screen.Screen',
    'net.minecraft.client.gui.widget.ButtonWidget',
    'net.minecraft.client.gui.widget.CheckboxWidget',
    'net.minecraft.client.gui.widget.SliderWidget',
    'net.minecraft.client.gui.widget.TextFieldWidget',
    'net.minecraft.client.sound.PositionedSoundInstance',
    'net.minecraft.item.ItemStack',
    'net.minecraft.item.Items',
    'net.minecraft.sound.SoundEvents',
    'net.minecraft.text.Text',
    'net.minecraft.util.Identifier',
)

_LEGACY_COMMON_IMPORTS = (
    'net.minecraft.client.Minecraft',
    'net.minecraft.client.audio.PositionedSoundRecord',
    'net.minecraft.client.gui.GuiButton',
    'net.minecraft.client.gui.GuiScreen',
    'net.minecraft.client.gui.GuiTextField',
    'net.minecraft.init.Items',
    'net.minecraft.init.SoundEvents',
    'net.minecraft.item.ItemStack',
    'net.minecraft.util.ResourceLocation',
)

TRANSFORM_IMPORTS: Dict[TransformStyle, Tuple[str, ...]] = {
    TransformStyle.GL11: ('org.lwjgl.opengl.GL11',),
    TransformStyle.GL_STATE_MANAGER: ('net.minecraft.client.renderer.GlStateManager',),
    TransformStyle.MATRIX_STACK: (
        'com.mojang.blaze3d.systems.RenderSystem',
        'net.minecraft.client.util.math.MatrixStack',
        'net.minecraft.util.math.Vec3f',
    ),
    TransformStyle.POSE_STACK: (
        'com.mojang.blaze3d.systems.RenderSystem',
        'com.mojang.blaze3d.vertex.PoseStack',
        'com.mojang.math.Vector3f',
    ),
    TransformStyle.DRAW_CONTEXT: (
        'net.minecraft.client.gui.DrawContext',
        'net.minecraft.client.gui.screen.ingame.InventoryScreen',
        'net.minecraft.util.math.RotationAxis',
    ),
}


def _annotation(loader: ModLoader, family: DialectFamily) -> Tuple[str, Tuple[str, ...]]:
    """Client-side environment marker and the imports it needs."""
    if family == DialectFamily.BARE_CLIENT:
        return '', ()
    if loader in FABRIC_LIKE:
        return '@Environment(EnvType.CLIENT)', ('net.fabricmc.api.EnvType', 'net.fabricmc.api.Environment')
    if family == DialectFamily.LEGACY:
        return '@SideOnly(Side.CLIENT)', (
            'net.minecraftforge.fml.relauncher.Side', 'net.minecraftforge.fml.relauncher.SideOnly')
    if loader == ModLoader.NEOFORGE:
        return '@OnlyIn(Dist.CLIENT)', ('net.neoforged.api.distmarker.Dist', 'net.neoforged.api.distmarker.OnlyIn')
    return '@OnlyIn(Dist.CLIENT)', (
        'net.minecraftforge.api.distmarker.Dist', 'net.minecraftforge.api.distmarker.OnlyIn')


# ============================================================================
# Profile
# ============================================================================

@dataclass(frozen=True)
class DialectProfile:
    """Every target-specific fact the generator needs, resolved once per document."""
    loader: ModLoader
    version: McVersion
    family: DialectFamily
    transform_style: TransformStyle
    imports: Tuple[str, ...]
    annotation: str
    base_class: str
    widget_classes: Mapping[ElementType, str] = field(hash=False)
    field_types: FrozenSet[ElementType]
    context_var: str
    context_type: str
    constructor_super: str
    init_signature: str
    super_init: str
    render_signature: str
    super_render: str
    background_call: str
    font_renderer: str
    client: str
    player: str
    add_child: str
    command_template: str
    draw: DrawTemplates = field(repr=False)
    widgets: WidgetTemplates = field(repr=False)
    actions: ActionTemplates = field(repr=False)
    transform: TransformTemplates = field(repr=False)

    @property
    def is_immediate_mode(self) -> bool:
        return self.family in (DialectFamily.LEGACY, DialectFamily.BARE_CLIENT)

    def widget_class(self, element_type: ElementType) -> Optional[str]:
        """Java class for a widget type, or None when it must be drawn by hand."""
        return self.widget_classes.get(element_type)

    def needs_field(self, element_type) -> bool:
        return element_type in self.field_types

    def fill_values(self, **values) -> Dict[str, str]:
        """Template values with the profile-level placeholders filled in."""
        merged = {
            'ctx': self.context_var,
            'font': self.font_renderer,
            'client': self.client,
            'player': self.player,
            'add': self.add_child,
        }
        merged.update(values)
        return merged

    def summary(self) -> Dict[str, object]:
        """JSON-friendly description (used by the MCP dialect tool)."""
        return {
            'loader': self.loader.value,
            'version': self.version.value,
            'family': self.family.value,
            'transform_style': self.transform_style.value,
            'base_class': self.base_class,
            'annotation': self.annotation or None,
            'context': f"{self.context_type} {self.context_var}".strip() or None,
            'init_signature': self.init_signature,
            'render_signature': self.render_signature,
            'widget_classes': {t.value: self.widget_classes.get(t) for t in ElementType},
            'field_types': sorted(t.value for t in self.field_types),
            'imports': list(self.imports),
        }


def _coerce(value, enum_cls, fallback):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return fallback


def _build_profile(loader: ModLoader, version: McVersion) -> DialectProfile:
    family = FAMILY_TABLE[(loader, version)]
    transform_style = TRANSFORM_TABLE[(loader, version)]
    annotation, annotation_imports = _annotation(loader, family)

    if family in (DialectFamily.LEGACY, DialectFamily.BARE_CLIENT):
        font = 'this.fontRenderer' if version == McVersion.V1_12_2 else 'this.fontRendererObj'
        player_field = 'player' if version == McVersion.V1_12_2 else 'thePlayer'
        base_imports = _LEGACY_COMMON_IMPORTS
        base_class = 'GuiScreen'
        context_var, context_type = '', ''
        constructor_super = 'super();'
        init_signature, super_init = 'public void initGui()', 'super.initGui();'
        render_signature = 'public void drawScreen(int mouseX, int mouseY, float partialTicks)'
        super_render = 'super.drawScreen(mouseX, mouseY, partialTicks);'
        background_call = 'this.drawDefaultBackground();'
        client = 'Minecraft.getMinecraft()'
        player = f'{client}.{player_field}'
        add_child = 'this.buttonList.add'
    else:
        font = 'this.textRenderer'
        base_imports = _MODERN_COMMON_IMPORTS
        base_class = 'Screen'
        if family == DialectFamily.MODERN:
            context_var, context_type = 'context', 'DrawContext'
        else:
            context_var = 'matrices'
            context_type = 'MatrixStack' if loader in FABRIC_LIKE else 'PoseStack'
        constructor_super = 'super(Text.literal("{title}"));'
        init_signature, super_init = 'protected void init()', 'super.init();'
        render_signature = f'public void render({context_type} {context_var}, int mouseX, int mouseY, float delta)'
        super_render = f'super.render({context_var}, mouseX, mouseY, delta);'
        background_call = f'this.renderBackground({context_var});'
        client = 'MinecraftClient.getInstance()'
        player = f'{client}.player'
        add_child = 'this.addButton' if version in ADD_BUTTON_VERSIONS else 'this.addDrawableChild'

    extra_imports = TRANSFORM_IMPORTS[transform_style]
    if family == DialectFamily.BARE_CLIENT and transform_style != TransformStyle.GL_STATE_MANAGER \
            and version == McVersion.V1_12_2:
        extra_imports = extra_imports + TRANSFORM_IMPORTS[TransformStyle.GL_STATE_MANAGER]
    imports = tuple(sorted(set(base_imports + extra_imports + annotation_imports)))

    actions = ACTION_TEMPLATES[family]
    uses_chat_command = version in CHAT_COMMAND_VERSIONS and family in (
        DialectFamily.MODERN, DialectFamily.MID_MODERN)

    return DialectProfile(
        loader=loader,
        version=version,
        family=family,
        transform_style=transform_style,
        imports=imports,
        annotation=annotation,
        base_class=base_class,
        widget_classes=MappingProxyType(dict(WIDGET_CLASSES[family])),
        field_types=FIELD_TYPES[family],
        context_var=context_var,
        context_type=context_type,
        constructor_super=constructor_super,
        init_signature=init_signature,
        super_init=super_init,
        render_signature=render_signature,
        super_render=super_render,
        background_call=background_call,
        font_renderer=font,
        client=client,
        player=player,
        add_child=add_child,
        command_template=actions.chat_command if uses_chat_command else actions.chat_message,
        draw=DRAW_TEMPLATES[family],
        widgets=WIDGET_TEMPLATES[family],
        actions=actions,
        transform=TRANSFORM_TEMPLATES[transform_style],
    )


@lru_cache(maxsize=None)
def _cached_profile(loader: ModLoader, version: McVersion) -> DialectProfile:
    return _build_profile(loader, version)


def resolve_dialect(loader: Union[ModLoader, str], version: Union[McVersion, str]) -> DialectProfile:
    """Resolve a loader/version pair to its profile.

    Unknown loaders fall back to Fabric and unknown versions to the newest
    version, so every input resolves to some profile.
    """
    loader = _coerce(loader, ModLoader, ModLoader.FABRIC)
    version = _coerce(version, McVersion, McVersion.V1_21)
    return _cached_profile(loader, version)
