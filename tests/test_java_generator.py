"""Tests for whole-document Java generation."""
import pytest

from generators.base import DuplicateIdentifierError
from generators.dialects import resolve_dialect
from generators.java_generator import generate_java_code
from generators.models import McVersion, ModLoader, ProjectSettings


class TestDocumentShape:
    """Fixed section order and totality."""

    def test_empty_document_still_yields_class(self, modern_settings):
        code = generate_java_code([], modern_settings)
        assert 'public class TestScreen extends Screen {' in code
        assert '    public TestScreen() { super(Text.literal("TestScreen")); }' in code
        assert 'protected void init() {' in code
        assert 'public void render(DrawContext context, int mouseX, int mouseY, float delta) {' in code
        assert code.endswith('\n}\n')

    def test_sections_in_order(self, modern_settings, go_button):
        code = generate_java_code([go_button], modern_settings)
        positions = [
            code.index('import net.minecraft'),
            code.index('@Environment(EnvType.CLIENT)'),
            code.index('public class TestScreen'),
            code.index('public TestScreen()'),
            code.index('protected void init()'),
            code.index('public void render('),
        ]
        assert positions == sorted(positions)

    def test_deterministic(self, modern_settings, go_button, styled_panel, sibling_screens):
        elements = [styled_panel, go_button]
        first = generate_java_code(elements, modern_settings, sibling_screens)
        second = generate_java_code(elements, modern_settings, sibling_screens)
        assert first == second

    def test_unknown_elements_are_skipped(self, modern_settings, go_button):
        with_unknown = generate_java_code([{'type': 'HOLOGRAM', 'x': 1}, go_button], modern_settings)
        assert with_unknown == generate_java_code([go_button], modern_settings)

    def test_settings_accept_model_defaults(self):
        code = generate_java_code([], {})
        assert 'public class MyCustomScreen extends Screen {' in code


class TestModernButton:
    """A plain button on 1.20.4 Fabric."""

    def test_builder_registration(self, modern_settings, go_button):
        code = generate_java_code([go_button], modern_settings)
        assert '.dimensions(10, 10, 100, 20)' in code
        assert 'Text.literal("Go")' in code
        assert 'this.addDrawableChild(ButtonWidget.builder(' in code

    def test_no_effects_emitted(self, modern_settings, go_button):
        code = generate_java_code([go_button], modern_settings)
        assert 'push' not in code
        assert 'Shadow' not in code
        assert 'fillGradient' not in code

    def test_on_click_goes_into_callback(self, modern_settings, go_button, sibling_screens):
        go_button['events'] = {'ON_CLICK': {'type': 'OPEN_SCREEN', 'value': 'screen-settings'}}
        code = generate_java_code([go_button], modern_settings, sibling_screens)
        lines = code.splitlines()
        start = lines.index('        this.addDrawableChild(ButtonWidget.builder(Text.literal("Go"), button -> {')
        assert lines[start + 1] == '            MinecraftClient.getInstance().setScreen(new SettingsScreen());'
        assert lines[start + 2] == '        }).dimensions(10, 10, 100, 20).build());'

    def test_label_is_escaped(self, modern_settings, go_button):
        go_button['label'] = 'Say "yes"'
        code = generate_java_code([go_button], modern_settings)
        assert 'Text.literal("Say \\"yes\\"")' in code


class TestResponsiveLayout:

    def test_far_anchor(self, modern_settings, go_button):
        modern_settings['responsive'] = True
        go_button['x'] = 300
        code = generate_java_code([go_button], modern_settings)
        # center 350 of 427 is past the far threshold
        assert '.dimensions(this.width - 127, 10, 100, 20)' in code

    def test_center_anchor(self, modern_settings, go_button):
        modern_settings['responsive'] = True
        go_button['x'] = 163
        go_button['y'] = 110
        code = generate_java_code([go_button], modern_settings)
        assert '.dimensions(this.width / 2 - 50, this.height / 2 - 10, 100, 20)' in code


class TestEffectsInRender:

    def test_effect_order(self, modern_settings, styled_panel):
        code = generate_java_code([styled_panel], modern_settings)
        order = [
            code.index('context.getMatrices().push();'),
            code.index('// Shadow'),
            code.index('context.fillGradient('),
            code.index('// Border'),
            code.index('context.getMatrices().pop();'),
        ]
        assert order == sorted(order)

    def test_rotation_brackets_are_balanced(self, modern_settings, styled_panel):
        second = dict(styled_panel, id='panel-2', rotation=90)
        code = generate_java_code([styled_panel, second], modern_settings)
        assert code.count('context.getMatrices().push();') == 2
        assert code.count('context.getMatrices().pop();') == 2

    def test_background_color(self, modern_settings):
        modern_settings['backgroundColor'] = '#101010'
        code = generate_java_code([], modern_settings)
        assert 'context.fill(0, 0, this.width, this.height, 0xFF101010);' in code
        assert code.index('this.renderBackground(context);') < code.index('0xFF101010')

    def test_super_render_before_elements(self, modern_settings, styled_panel):
        code = generate_java_code([styled_panel], modern_settings)
        assert code.index('super.render(context, mouseX, mouseY, delta);') < code.index('// Shadow')


class TestWidgets:

    def test_text_field_with_listener(self, modern_settings):
        field = {
            'type': 'TEXT_FIELD', 'x': 10, 'y': 40, 'width': 120, 'height': 20,
            'variableName': 'nameField',
            'events': {'ON_CHANGE': {'type': 'CUSTOM_CODE', 'value': 'this.dirty = true;'}},
        }
        code = generate_java_code([field], modern_settings)
        assert '    private TextFieldWidget nameField;' in code
        assert 'this.nameField = new TextFieldWidget(this.textRenderer, 10, 40, 120, 20, Text.literal(""));' in code
        assert 'this.nameField.setChangedListener(text -> {' in code
        assert '            this.dirty = true;' in code

    def test_slider_starts_at_normalized_value(self, modern_settings):
        slider = {
            'type': 'SLIDER', 'x': 10, 'y': 70, 'width': 150, 'height': 20,
            'variableName': 'volume', 'label': 'Volume', 'min': 0, 'max': 200, 'value': 50,
        }
        code = generate_java_code([slider], modern_settings)
        assert '    private SliderWidget volume;' in code
        assert 'Text.literal("Volume: 50"), 0.25) {' in code
        assert 'this.addDrawableChild(this.volume);' in code

    def test_centered_label(self, modern_settings):
        label = {'type': 'LABEL', 'x': 0, 'y': 5, 'width': 100, 'height': 10,
                 'label': 'Title', 'textAlign': 'center', 'color': '#ffaa00'}
        code = generate_java_code([label], modern_settings)
        assert 'this.textRenderer.getWidth("Title")' in code
        assert '0xFFAA00, true);' in code

    def test_item_namespace_is_dropped(self, modern_settings):
        item = {'type': 'ITEM', 'x': 5, 'y': 5, 'width': 16, 'height': 16, 'itemId': 'minecraft:diamond_sword'}
        code = generate_java_code([item], modern_settings)
        assert 'context.drawItem(new ItemStack(Items.DIAMOND_SWORD), 5, 5);' in code

    def test_progress_bar(self, modern_settings):
        bar = {'type': 'PROGRESS_BAR', 'x': 10, 'y': 100, 'width': 100, 'height': 6,
               'progress': 40, 'color': '#00ff00'}
        code = generate_java_code([bar], modern_settings)
        assert 'context.fill(10, 100, 110, 106, 0xFF555555);' in code
        assert 'context.fill(10, 100, 50, 106, 0xFF00FF00);' in code

    def test_tooltip(self, modern_settings, go_button):
        go_button['tooltip'] = 'Start'
        code = generate_java_code([go_button], modern_settings)
        assert 'if (mouseX >= 10 && mouseX <= 110 && mouseY >= 10 && mouseY <= 30) {' in code
        assert 'context.drawTooltip(this.textRenderer, Text.literal("Start"), mouseX, mouseY);' in code


class TestDuplicateIdentifiers:

    def test_duplicate_field_names_raise(self, modern_settings):
        fields = [
            {'type': 'TEXT_FIELD', 'variableName': 'input'},
            {'type': 'TEXT_FIELD', 'variableName': 'input'},
        ]
        with pytest.raises(DuplicateIdentifierError) as exc:
            generate_java_code(fields, modern_settings)
        assert exc.value.names == ['input']

    def test_modern_buttons_need_no_field(self, modern_settings, go_button):
        code = generate_java_code([go_button, dict(go_button, id='btn-2')], modern_settings)
        assert code.count('ButtonWidget.builder(') == 2

    def test_legacy_buttons_are_fields(self, legacy_settings, go_button):
        with pytest.raises(ValueError):
            generate_java_code([go_button, dict(go_button, id='btn-2')], legacy_settings)


class TestLegacyDialect:
    """Forge 1.8.9 immediate-mode output."""

    def test_class_skeleton(self, legacy_settings, go_button):
        code = generate_java_code([go_button], legacy_settings)
        assert '@SideOnly(Side.CLIENT)\npublic class LegacyScreen extends GuiScreen {' in code
        assert '    private GuiButton goButton;' in code
        assert '    public LegacyScreen() { super(); }' in code
        assert 'public void initGui() {' in code
        assert 'this.drawDefaultBackground();' in code

    def test_button_registration(self, legacy_settings, go_button):
        code = generate_java_code([go_button], legacy_settings)
        assert 'this.buttonList.add(this.goButton = new GuiButton(0, 10, 10, 100, 20, "Go"));' in code

    def test_unhooked_action_is_comment(self, legacy_settings, go_button, sibling_screens):
        go_button['events'] = {'ON_CLICK': {'type': 'OPEN_SCREEN', 'value': 'screen-shop'}}
        code = generate_java_code([go_button], legacy_settings, sibling_screens)
        assert '// ON_CLICK (dispatch from actionPerformed / keyTyped): ' \
               'Minecraft.getMinecraft().displayGuiScreen(new ShopScreen());' in code

    def test_checkbox_drawn_by_hand(self, legacy_settings):
        checkbox = {'type': 'CHECKBOX', 'x': 10, 'y': 10, 'width': 12, 'height': 12,
                    'label': 'Enabled', 'checked': True, 'variableName': 'enabled'}
        code = generate_java_code([checkbox], legacy_settings)
        assert 'CheckboxWidget' not in code
        assert '// Checkbox: enabled' in code
        assert 'drawRect(13, 13, 19, 19, 0xFFFFFFFF);' in code
        assert 'this.fontRendererObj.drawStringWithShadow("Enabled", 26, 12, 0xFFFFFF);' in code

    def test_text_field_draws_itself(self, legacy_settings):
        field = {'type': 'TEXT_FIELD', 'x': 10, 'y': 40, 'width': 120, 'height': 20, 'variableName': 'query'}
        code = generate_java_code([field], legacy_settings)
        assert 'this.query = new GuiTextField(0, this.fontRendererObj, 10, 40, 120, 20);' in code
        assert 'this.query.drawTextBox();' in code

    def test_gl11_rotation(self, legacy_settings, styled_panel):
        code = generate_java_code([styled_panel], legacy_settings)
        assert 'GL11.glPushMatrix();' in code
        assert 'GL11.glPopMatrix();' in code
        assert 'import org.lwjgl.opengl.GL11;' in code


class TestOtherDialects:

    def test_mid_modern_forge_uses_pose_stack(self, modern_settings, styled_panel):
        modern_settings.update(loader='Forge', version='1.18.2')
        code = generate_java_code([styled_panel], modern_settings)
        assert 'public void render(PoseStack matrices, int mouseX, int mouseY, float delta) {' in code
        assert 'matrices.pushPose();' in code
        assert 'fillGradient(matrices, 20, 30, 120, 80, 0xFFFF0000, 0xFF0000FF);' in code

    def test_bare_client_has_no_annotation(self, modern_settings, go_button):
        modern_settings.update(loader='Client (LWJGL 2)', version='1.8.9')
        code = generate_java_code([go_button], modern_settings)
        assert '@' not in code.split('public class')[0].replace('@Override', '')
        assert 'extends GuiScreen' in code


class TestIdentifierNames:
    """Every field gets a usable, unique Java name."""

    def test_unnamed_fields_get_index_names(self, modern_settings):
        code = generate_java_code([{'type': 'TEXT_FIELD'}, {'type': 'TEXT_FIELD'}], modern_settings)
        assert '    private TextFieldWidget element0;' in code
        assert '    private TextFieldWidget element1;' in code
        assert 'private TextFieldWidget ;' not in code
        assert 'this. =' not in code

    def test_invalid_names_are_sanitized(self, modern_settings):
        fields = [
            {'type': 'TEXT_FIELD', 'variableName': 'user name'},
            {'type': 'TEXT_FIELD', 'variableName': 'class'},
            {'type': 'TEXT_FIELD', 'variableName': '2nd'},
        ]
        code = generate_java_code(fields, modern_settings)
        assert '    private TextFieldWidget user_name;' in code
        assert '    private TextFieldWidget _class;' in code
        assert '    private TextFieldWidget _2nd;' in code

    def test_fallback_name_collision_raises(self, modern_settings):
        fields = [{'type': 'TEXT_FIELD'}, {'type': 'TEXT_FIELD', 'variableName': 'element0'}]
        with pytest.raises(DuplicateIdentifierError) as exc:
            generate_java_code(fields, modern_settings)
        assert exc.value.names == ['element0']

    def test_sanitized_collision_raises(self, modern_settings):
        fields = [
            {'type': 'SLIDER', 'variableName': 'a-b'},
            {'type': 'SLIDER', 'variableName': 'a b'},
        ]
        with pytest.raises(DuplicateIdentifierError):
            generate_java_code(fields, modern_settings)


class TestNullFields:
    """Explicit nulls behave like missing keys."""

    def test_nulls_fall_back_to_defaults(self, modern_settings):
        button = {
            'type': 'BUTTON', 'x': 10, 'y': 10, 'width': 100, 'height': 20,
            'label': None, 'textAlign': None, 'rotation': None, 'variableName': None,
            'shadow': {'enabled': True, 'color': None},
            'gradient': {'enabled': True, 'startColor': None, 'endColor': None, 'direction': None},
            'events': {'ON_CLICK': {'type': 'EXECUTE_COMMAND', 'value': None}, 'ON_CHANGE': None},
        }
        dropdown = {'type': 'DROPDOWN', 'x': 10, 'y': 40, 'width': 80, 'height': 16,
                    'options': None, 'label': None, 'color': None}
        code = generate_java_code([button, dropdown], modern_settings)
        assert '.dimensions(10, 10, 100, 20)' in code
        assert 'Text.literal("")' in code
        assert 'context.fillGradient(10, 10, 110, 30, 0xFF3C3C3C, 0xFF2B2B2B);' in code
        assert 'context.fill(12, 12, 112, 32, 0x7F000000);' in code
        assert 'sendChatCommand' not in code
        assert '// Options' not in code

    def test_null_settings_fields(self, go_button):
        settings = {'loader': 'Fabric', 'version': '1.21', 'className': None, 'screenWidth': None}
        code = generate_java_code([go_button], settings)
        assert 'public class MyCustomScreen extends Screen {' in code


class TestEveryDialect:
    """Every loader/version pair yields a well-formed class for a full document."""

    @pytest.mark.parametrize('responsive', [False, True])
    @pytest.mark.parametrize('loader', list(ModLoader))
    @pytest.mark.parametrize('version', list(McVersion))
    def test_full_document(self, loader, version, responsive, every_element, sibling_screens):
        settings = ProjectSettings(loader=loader, version=version, class_name='AllScreen', responsive=responsive)
        profile = resolve_dialect(loader, version)
        code = generate_java_code(every_element, settings, sibling_screens)

        assert f'public class AllScreen extends {profile.base_class} {{' in code
        assert code.count('{') == code.count('}'), "braces must balance"
        pushes = code.count(profile.transform.push)
        assert pushes == len(every_element), "every rotated element opens one transform scope"
        assert code.count(profile.transform.pop) == pushes
