"""
Java snippet tables for every dialect family.

Nothing in here knows about elements or documents: each entry is a plain
``str.format`` template (or a tuple of template lines) keyed by dialect family
or transform style. Placeholders are filled by the lowering functions; the
profile-level values ``{ctx}``, ``{font}``, ``{client}``, ``{player}`` and
``{add}`` come from the resolved DialectProfile. A line consisting only of
``{body}`` marks where a nested statement block is spliced in.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple


class DialectFamily(str, Enum):
    """Coarse code-shape groupings."""
    LEGACY = "legacy"              # 1.8.9 / 1.12.2 immediate mode GuiScreen
    MID_MODERN = "mid-modern"      # 1.16 - 1.19 matrix stack, no draw context
    MODERN = "modern-120-plus"     # 1.20+ unified DrawContext
    BARE_CLIENT = "bare-client"    # standalone LWJGL 2 client, no mod loader


class TransformStyle(str, Enum):
    """How a dialect pushes, rotates and pops the model-view transform."""
    GL11 = "GL11"
    GL_STATE_MANAGER = "GlStateManager"
    MATRIX_STACK = "MatrixStack"
    POSE_STACK = "PoseStack"
    DRAW_CONTEXT = "DrawContext"


BODY_MARKER = '{body}'

Lines = Tuple[str, ...]


# ---------------------------------------------------------------------------
# Template bundles
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DrawTemplates:
    fill: str
    gradient: str
    text: str
    text_shadowed: str
    text_width: str
    tooltip: str
    scissor_open: str
    scissor_close: str
    item: str
    entity: str
    texture: Lines
    # Widgets that do not render themselves (legacy text boxes)
    text_box: Optional[str] = None


@dataclass(frozen=True)
class WidgetTemplates:
    """Init-method registration per widget kind; None means draw it by hand."""
    button: Lines
    text_field: Lines
    checkbox: Optional[Lines]
    slider: Optional[Lines]
    # Change hook for text fields; None means no listener API
    text_field_listener: Optional[Lines]
    # Statement attached where the dialect has no callback hook at all
    unhooked: str


@dataclass(frozen=True)
class ActionTemplates:
    open_screen: str
    chat_command: str
    chat_message: str
    play_sound: str


@dataclass(frozen=True)
class TransformTemplates:
    push: str
    translate: str
    rotate: str
    pop: str


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

_IMMEDIATE_DRAW = DrawTemplates(
    fill='drawRect({x1}, {y1}, {x2}, {y2}, {color});',
    gradient='drawGradientRect({x1}, {y1}, {x2}, {y2}, {start}, {end});',
    text='{font}.drawString("{text}", {x}, {y}, {color});',
    text_shadowed='{font}.drawStringWithShadow("{text}", {x}, {y}, {color});',
    text_width='{font}.getStringWidth("{text}")',
    tooltip='this.drawHoveringText(java.util.Collections.singletonList("{text}"), mouseX, mouseY);',
    scissor_open='// GL11.glEnable(GL11.GL_SCISSOR_TEST); clip to ({x1}, {y1}) - ({x2}, {y2}) in window pixels',
    scissor_close='// GL11.glDisable(GL11.GL_SCISSOR_TEST);',
    item='this.itemRender.renderItemAndEffectIntoGUI(new ItemStack(Items.{item}), {x}, {y});',
    entity='// GuiInventory.drawEntityOnScreen({x}, {y}, {size}, mouseX, mouseY, <{entity} instance>);',
    texture=(
        'this.mc.getTextureManager().bindTexture(new ResourceLocation("{path}"));',
        'drawModalRectWithCustomSizedTexture({x}, {y}, 0, 0, {w}, {h}, {w}, {h});',
    ),
    text_box='this.{name}.drawTextBox();',
)

DRAW_TEMPLATES: Dict[DialectFamily, DrawTemplates] = {
    DialectFamily.LEGACY: _IMMEDIATE_DRAW,
    DialectFamily.BARE_CLIENT: _IMMEDIATE_DRAW,
    DialectFamily.MID_MODERN: DrawTemplates(
        fill='fill({ctx}, {x1}, {y1}, {x2}, {y2}, {color});',
        gradient='fillGradient({ctx}, {x1}, {y1}, {x2}, {y2}, {start}, {end});',
        text='this.textRenderer.draw({ctx}, "{text}", {x}, {y}, {color});',
        text_shadowed='drawTextWithShadow({ctx}, this.textRenderer, Text.literal("{text}"), {x}, {y}, {color});',
        text_width='this.textRenderer.getWidth("{text}")',
        tooltip='this.renderTooltip({ctx}, Text.literal("{text}"), mouseX, mouseY);',
        scissor_open='// RenderSystem.enableScissor(...); clip to ({x1}, {y1}) - ({x2}, {y2}) scaled to the window',
        scissor_close='// RenderSystem.disableScissor();',
        item='this.itemRenderer.renderInGuiWithModels(new ItemStack(Items.{item}), {x}, {y});',
        entity='// InventoryScreen.drawEntity({x}, {y}, {size}, mouseX, mouseY, <{entity} instance>);',
        texture=(
            'RenderSystem.setShaderTexture(0, new Identifier("{path}"));',
            'drawTexture({ctx}, {x}, {y}, 0, 0, {w}, {h}, {w}, {h});',
        ),
    ),
    DialectFamily.MODERN: DrawTemplates(
        fill='context.fill({x1}, {y1}, {x2}, {y2}, {color});',
        gradient='context.fillGradient({x1}, {y1}, {x2}, {y2}, {start}, {end});',
        text='context.drawText(this.textRenderer, "{text}", {x}, {y}, {color}, false);',
        text_shadowed='context.drawText(this.textRenderer, "{text}", {x}, {y}, {color}, true);',
        text_width='this.textRenderer.getWidth("{text}")',
        tooltip='context.drawTooltip(this.textRenderer, Text.literal("{text}"), mouseX, mouseY);',
        scissor_open='context.enableScissor({x1}, {y1}, {x2}, {y2});',
        scissor_close='context.disableScissor();',
        item='context.drawItem(new ItemStack(Items.{item}), {x}, {y});',
        entity='InventoryScreen.drawEntity(context, {x}, {y}, {size}, mouseX, mouseY, null); // supply the {entity} instance',
        texture=(
            'context.drawTexture(new Identifier("{path}"), {x}, {y}, 0, 0, {w}, {h}, {w}, {h});',
        ),
    ),
}


# ---------------------------------------------------------------------------
# Widgets
# ---------------------------------------------------------------------------

_LEGACY_WIDGETS = WidgetTemplates(
    button=(
        'this.buttonList.add(this.{name} = new GuiButton({id}, {x}, {y}, {w}, {h}, "{label}"));',
    ),
    text_field=(
        'this.{name} = new GuiTextField({id}, {font}, {x}, {y}, {w}, {h});',
        'this.{name}.setText("{label}");',
    ),
    checkbox=None,
    slider=None,
    text_field_listener=None,
    unhooked='// {event} (dispatch from actionPerformed / keyTyped): {statement}',
)

_SLIDER = (
    'this.{name} = new SliderWidget({x}, {y}, {w}, {h}, Text.literal("{label}: {start}"), {initial}) {{',
    '    @Override',
    '    protected void updateMessage() {{',
    '        this.setMessage(Text.literal("{label}: " + Math.round({min} + this.value * {span})));',
    '    }}',
    '',
    '    @Override',
    '    protected void applyValue() {{',
    '        ' + BODY_MARKER,
    '    }}',
    '}};',
    '{add}(this.{name});',
)

_TEXT_FIELD = (
    'this.{name} = new TextFieldWidget(this.textRenderer, {x}, {y}, {w}, {h}, Text.literal("{label}"));',
    '{add}(this.{name});',
)

_TEXT_FIELD_LISTENER = (
    'this.{name}.setChangedListener(text -> {{',
    '    ' + BODY_MARKER,
    '}});',
)

_BUILDER_BUTTON = (
    '{add}(ButtonWidget.builder(Text.literal("{label}"), button -> {{',
    '    ' + BODY_MARKER,
    '}}).dimensions({x}, {y}, {w}, {h}).build());',
)

WIDGET_TEMPLATES: Dict[DialectFamily, WidgetTemplates] = {
    DialectFamily.LEGACY: _LEGACY_WIDGETS,
    DialectFamily.BARE_CLIENT: _LEGACY_WIDGETS,
    DialectFamily.MID_MODERN: WidgetTemplates(
        button=_BUILDER_BUTTON,
        text_field=_TEXT_FIELD,
        checkbox=(
            'this.{name} = new CheckboxWidget({x}, {y}, {w}, {h}, Text.literal("{label}"), {checked});',
            '{add}(this.{name});',
        ),
        slider=_SLIDER,
        text_field_listener=_TEXT_FIELD_LISTENER,
        unhooked='// {event}: no callback hook in this version, run from mouseClicked: {statement}',
    ),
    DialectFamily.MODERN: WidgetTemplates(
        button=_BUILDER_BUTTON,
        text_field=_TEXT_FIELD,
        checkbox=(
            'this.{name} = CheckboxWidget.builder(Text.literal("{label}"), this.textRenderer)',
            '        .pos({x}, {y})',
            '        .checked({checked})',
            '        .callback((checkbox, checked) -> {{',
            '            ' + BODY_MARKER,
            '        }})',
            '        .build();',
            '{add}(this.{name});',
        ),
        slider=_SLIDER,
        text_field_listener=_TEXT_FIELD_LISTENER,
        unhooked='// {event}: {statement}',
    ),
}


# ---------------------------------------------------------------------------
# Event actions
# ---------------------------------------------------------------------------

_MODERN_ACTIONS = ActionTemplates(
    open_screen='{client}.setScreen(new {screen}());',
    chat_command='{player}.networkHandler.sendChatCommand("{command}");',
    chat_message='{player}.sendChatMessage("/{command}");',
    play_sound='{client}.getSoundManager().play(PositionedSoundInstance.master(SoundEvents.{sound}, 1.0f));',
)

_LEGACY_ACTIONS = ActionTemplates(
    open_screen='{client}.displayGuiScreen(new {screen}());',
    chat_command='{player}.sendChatMessage("/{command}");',
    chat_message='{player}.sendChatMessage("/{command}");',
    play_sound='{client}.getSoundHandler().playSound(PositionedSoundRecord.getMasterRecord(SoundEvents.{sound}, 1.0F));',
)

ACTION_TEMPLATES: Dict[DialectFamily, ActionTemplates] = {
    DialectFamily.LEGACY: _LEGACY_ACTIONS,
    DialectFamily.BARE_CLIENT: _LEGACY_ACTIONS,
    DialectFamily.MID_MODERN: _MODERN_ACTIONS,
    DialectFamily.MODERN: _MODERN_ACTIONS,
}


# ---------------------------------------------------------------------------
# Transforms
# ---------------------------------------------------------------------------

TRANSFORM_TEMPLATES: Dict[TransformStyle, TransformTemplates] = {
    TransformStyle.GL11: TransformTemplates(
        push='GL11.glPushMatrix();',
        translate='GL11.glTranslatef({x}, {y}, 0);',
        rotate='GL11.glRotatef({degrees}, 0, 0, 1);',
        pop='GL11.glPopMatrix();',
    ),
    TransformStyle.GL_STATE_MANAGER: TransformTemplates(
        push='GlStateManager.pushMatrix();',
        translate='GlStateManager.translate({x}, {y}, 0);',
        rotate='GlStateManager.rotate({degrees}, 0, 0, 1);',
        pop='GlStateManager.popMatrix();',
    ),
    TransformStyle.MATRIX_STACK: TransformTemplates(
        push='matrices.push();',
        translate='matrices.translate({x}, {y}, 0);',
        rotate='matrices.multiply(Vec3f.POSITIVE_Z.getDegreesQuaternion({degrees}));',
        pop='matrices.pop();',
    ),
    TransformStyle.POSE_STACK: TransformTemplates(
        push='matrices.pushPose();',
        translate='matrices.translate({x}, {y}, 0);',
        rotate='matrices.mulPose(Vector3f.ZP.rotationDegrees({degrees}));',
        pop='matrices.popPose();',
    ),
    TransformStyle.DRAW_CONTEXT: TransformTemplates(
        push='context.getMatrices().push();',
        translate='context.getMatrices().translate({x}, {y}, 0);',
        rotate='context.getMatrices().multiply(RotationAxis.POSITIVE_Z.rotationDegrees({degrees}));',
        pop='context.getMatrices().pop();',
    ),
}


# ---------------------------------------------------------------------------
# Expansion
# ---------------------------------------------------------------------------

def expand(lines: Iterable[str], body: Iterable[str] = (), **values) -> List[str]:
    """Fill a multi-line template, splicing `body` at the marker line.

    The marker line's indentation is applied to every body line; an empty body
    leaves the enclosing braces empty.
    """
    body = list(body)
    out = []
    for line in lines:
        if line.strip() == BODY_MARKER:
            pad = line[:len(line) - len(line.lstrip())]
            out.extend(f"{pad}{b}" if b else '' for b in body)
        else:
            out.append(line.format(**values))
    return out
