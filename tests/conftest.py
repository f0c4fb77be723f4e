"""Shared test fixtures for generator tests."""
import pytest


@pytest.fixture
def modern_settings():
    """Fabric 1.20.4, fixed layout on the default canvas."""
    return {
        'loader': 'Fabric',
        'version': '1.20.4',
        'className': 'TestScreen',
        'screenWidth': 427,
        'screenHeight': 240,
        'responsive': False,
    }


@pytest.fixture
def legacy_settings():
    """Forge 1.8.9, fixed layout."""
    return {
        'loader': 'Forge',
        'version': '1.8.9',
        'className': 'LegacyScreen',
        'screenWidth': 427,
        'screenHeight': 240,
        'responsive': False,
    }


@pytest.fixture
def go_button():
    """Plain button with no effects."""
    return {
        'id': 'btn-1',
        'type': 'BUTTON',
        'x': 10,
        'y': 10,
        'width': 100,
        'height': 20,
        'label': 'Go',
        'variableName': 'goButton',
    }


@pytest.fixture
def styled_panel():
    """Panel with gradient, shadow, border and rotation."""
    return {
        'id': 'panel-1',
        'type': 'PANEL',
        'x': 20,
        'y': 30,
        'width': 100,
        'height': 50,
        'rotation': 45,
        'variableName': 'mainPanel',
        'color': '#333333',
        'borderColor': '#ffffff',
        'borderWidth': 2,
        'gradient': {'enabled': True, 'startColor': '#ff0000', 'endColor': '#0000ff', 'direction': 'vertical'},
        'shadow': {'enabled': True, 'color': '#000000', 'xOffset': 4, 'yOffset': 4, 'blur': 0},
    }


@pytest.fixture
def sibling_screens():
    """Sibling screens as the editor hands them over."""
    return [
        {'id': 'screen-settings', 'settings': {'className': 'SettingsScreen'}},
        {'id': 'screen-shop', 'className': 'ShopScreen'},
    ]


@pytest.fixture
def every_element():
    """One element of every type, each with every effect and both events."""
    effects = {
        'rotation': 30,
        'opacity': 0.8,
        'tooltip': 'Tip',
        'label': 'Text',
        'color': '#336699',
        'borderColor': '#ffffff',
        'borderWidth': 1,
        'gradient': {'enabled': True, 'startColor': '#ff0000', 'endColor': '#0000ff', 'direction': 'horizontal'},
        'shadow': {'enabled': True, 'color': '#000000', 'xOffset': 2, 'yOffset': 2},
        'hover': {'enabled': True, 'type': 'GLOW', 'glowColor': '#ffff00'},
        'backdropBlur': 4,
        'events': {
            'ON_CLICK': {'type': 'OPEN_SCREEN', 'value': 'screen-shop'},
            'ON_CHANGE': {'type': 'EXECUTE_COMMAND', 'value': '/say hi'},
        },
    }
    extras = {
        'IMAGE': {'texturePath': 'flowgui:textures/gui/panel.png'},
        'ITEM': {'itemId': 'minecraft:apple'},
        'DROPDOWN': {'options': ['Easy', 'Hard']},
        'PROGRESS_BAR': {'progress': 60},
        'CHECKBOX': {'checked': True},
    }
    types = [
        'BUTTON', 'LABEL', 'TEXT_FIELD', 'PANEL', 'SCROLL_PANEL', 'SLOT', 'CHECKBOX',
        'SLIDER', 'DROPDOWN', 'IMAGE', 'ENTITY', 'ITEM', 'PROGRESS_BAR',
    ]
    return [
        dict(effects, type=kind, id=f'el-{i}', variableName=f'element{kind.title().replace("_", "")}',
             x=(i * 31) % 380, y=(i * 17) % 200, width=40, height=20, **extras.get(kind, {}))
        for i, kind in enumerate(types)
    ]
