"""Tests for the MCP tool layer."""
import asyncio
import json

import httpx
import pytest
from pydantic import ValidationError

import flowgui_mcp
from flowgui_mcp import (
    AnalyzeGuiInput, DialectInput, GenerateCodeInput, ListScreensInput, ResponseFormat,
    SaveScreenInput, ScreenIdInput, _build_analysis_prompt, _handle_api_error,
    flowgui_analyze_gui, flowgui_generate_code, flowgui_get_dialect, flowgui_list_screens,
    flowgui_remove_screen, flowgui_save_screen,
)
from generators.models import ProjectSettings


@pytest.fixture
def screen_store(tmp_path, monkeypatch):
    """Point screen storage at a temporary file."""
    path = tmp_path / 'screens.json'
    monkeypatch.setenv('FLOWGUI_SCREENS_PATH', str(path))
    return path


def _save(screen):
    return json.loads(asyncio.run(flowgui_save_screen(SaveScreenInput(screen=screen))))


class TestGenerateCode:

    def test_markdown_output(self, modern_settings, go_button):
        params = GenerateCodeInput(elements=[go_button], settings=modern_settings)
        result = asyncio.run(flowgui_generate_code(params))
        assert result.startswith('# Generated Code: TestScreen')
        assert '```java' in result
        assert '.dimensions(10, 10, 100, 20)' in result

    def test_json_output(self, legacy_settings, go_button):
        params = GenerateCodeInput(elements=[go_button], settings=legacy_settings,
                                   response_format=ResponseFormat.JSON)
        data = json.loads(asyncio.run(flowgui_generate_code(params)))
        assert data['family'] == 'legacy'
        assert data['class_name'] == 'LegacyScreen'
        assert 'extends GuiScreen' in data['code']

    def test_requires_settings_or_screen(self, go_button):
        with pytest.raises(ValidationError):
            GenerateCodeInput(elements=[go_button])

    def test_duplicate_identifiers_are_reported(self, modern_settings):
        fields = [{'type': 'SLIDER', 'variableName': 'level'}, {'type': 'SLIDER', 'variableName': 'level'}]
        result = asyncio.run(flowgui_generate_code(GenerateCodeInput(elements=fields, settings=modern_settings)))
        assert result.startswith('Error: Duplicate variable names: level')

    def test_stored_screen_with_siblings(self, screen_store, modern_settings, go_button):
        go_button['events'] = {'ON_CLICK': {'type': 'OPEN_SCREEN', 'value': 'shop'}}
        _save({'id': 'main', 'name': 'Main', 'elements': [go_button], 'settings': modern_settings})
        _save({'id': 'shop', 'name': 'Shop', 'settings': {'className': 'ShopScreen'}})

        result = asyncio.run(flowgui_generate_code(GenerateCodeInput(screen_id='main')))
        assert 'setScreen(new ShopScreen());' in result

    def test_missing_stored_screen(self, screen_store):
        result = asyncio.run(flowgui_generate_code(GenerateCodeInput(screen_id='nope')))
        assert result == "Error: Screen 'nope' not found."

    def test_long_output_is_truncated(self, modern_settings, go_button, monkeypatch):
        monkeypatch.setattr(flowgui_mcp, 'CHARACTER_LIMIT', 100)
        result = asyncio.run(flowgui_generate_code(GenerateCodeInput(elements=[go_button], settings=modern_settings)))
        assert result.endswith('... (truncated)')


class TestGetDialect:

    def test_markdown(self):
        result = asyncio.run(flowgui_get_dialect(DialectInput(loader='Forge', version='1.12.2')))
        assert '**Family:** legacy' in result
        assert '**Transform:** GlStateManager' in result
        assert '- CHECKBOX: drawn by hand' in result

    def test_json(self):
        params = DialectInput(loader='NeoForge', version='1.21', response_format='json')
        data = json.loads(asyncio.run(flowgui_get_dialect(params)))
        assert data['annotation'] == '@OnlyIn(Dist.CLIENT)'
        assert data['context'] == 'DrawContext context'

    def test_rejects_unknown_version(self):
        with pytest.raises(ValidationError):
            DialectInput(version='1.7.10')


class TestScreenStorage:
    """Save, list and remove screens in a JSON file."""

    def test_save_then_list(self, screen_store, modern_settings, go_button):
        result = _save({'id': 'main', 'name': 'Main', 'elements': [go_button], 'settings': modern_settings})
        assert result['status'] == 'success'
        assert result['action'] == 'added'
        assert screen_store.exists()

        listing = json.loads(asyncio.run(flowgui_list_screens(ListScreensInput())))
        assert listing['count'] == 1
        assert listing['screens'][0]['class_name'] == 'TestScreen'
        assert listing['screens'][0]['element_count'] == 1

    def test_update_keeps_created_at(self, screen_store, modern_settings):
        _save({'id': 'main', 'name': 'Main', 'settings': modern_settings})
        created = json.loads(screen_store.read_text())['screens']['main']['created_at']
        result = _save({'id': 'main', 'name': 'Main v2', 'settings': modern_settings})
        assert result['action'] == 'updated'
        assert json.loads(screen_store.read_text())['screens']['main']['created_at'] == created

    def test_stored_document_uses_editor_keys(self, screen_store, modern_settings):
        _save({'id': 'main', 'settings': modern_settings})
        stored = json.loads(screen_store.read_text())['screens']['main']['screen']
        assert stored['settings']['className'] == 'TestScreen'

    def test_list_filters_by_loader(self, screen_store, modern_settings, legacy_settings):
        _save({'id': 'a', 'settings': modern_settings})
        _save({'id': 'b', 'settings': legacy_settings})
        listing = json.loads(asyncio.run(flowgui_list_screens(ListScreensInput(loader='Forge'))))
        assert [s['id'] for s in listing['screens']] == ['b']

    def test_remove(self, screen_store, modern_settings):
        _save({'id': 'main', 'name': 'Main', 'settings': modern_settings})
        result = json.loads(asyncio.run(flowgui_remove_screen(ScreenIdInput(screen_id='main'))))
        assert result['status'] == 'success'
        assert result['removed_screen'] == 'Main'
        listing = json.loads(asyncio.run(flowgui_list_screens(ListScreensInput())))
        assert listing['count'] == 0

    def test_remove_missing(self, screen_store):
        result = json.loads(asyncio.run(flowgui_remove_screen(ScreenIdInput(screen_id='ghost'))))
        assert result['status'] == 'not_found'

    def test_corrupt_store_reads_as_empty(self, screen_store):
        screen_store.write_text('{not json')
        listing = json.loads(asyncio.run(flowgui_list_screens(ListScreensInput())))
        assert listing['count'] == 0


class TestAnalyzeGui:
    """Layout review without touching the network."""

    def test_prompt_summarizes_elements(self, go_button):
        settings = ProjectSettings(loader='Forge', version='1.8.9', responsive=True)
        prompt = _build_analysis_prompt([go_button], settings)
        assert 'working with: Forge for version 1.8.9' in prompt
        assert '- BUTTON (ID: goButton): Pos(10,10), Size(100x20), Label("Go")' in prompt
        assert '"Adaptive Resolution" mode ENABLED' in prompt
        assert 'legacy Gui methods' in prompt

    def test_returns_model_text(self, modern_settings, go_button, monkeypatch):
        prompts = []

        async def fake_request(prompt):
            prompts.append(prompt)
            return {'candidates': [{'content': {'parts': [{'text': 'Looks good.'}]}}]}

        monkeypatch.setattr(flowgui_mcp, '_make_gemini_request', fake_request)
        result = asyncio.run(flowgui_analyze_gui(AnalyzeGuiInput(elements=[go_button], settings=modern_settings)))
        assert result == 'Looks good.'
        assert 'Focus on DrawContext.' in prompts[0]

    def test_empty_response(self, modern_settings, monkeypatch):
        async def fake_request(prompt):
            return {'candidates': []}

        monkeypatch.setattr(flowgui_mcp, '_make_gemini_request', fake_request)
        result = asyncio.run(flowgui_analyze_gui(AnalyzeGuiInput(settings=modern_settings)))
        assert result == 'No response generated.'

    def test_missing_api_key(self, modern_settings, monkeypatch):
        monkeypatch.delenv('GEMINI_API_KEY', raising=False)
        monkeypatch.delenv('API_KEY', raising=False)
        result = asyncio.run(flowgui_analyze_gui(AnalyzeGuiInput(settings=modern_settings)))
        assert result.startswith('Error: Gemini API key not found')


class TestHandleApiError:

    def _status_error(self, status):
        request = httpx.Request('POST', 'https://example.invalid')
        response = httpx.Response(status, request=request)
        return httpx.HTTPStatusError('failed', request=request, response=response)

    def test_rate_limit(self):
        assert 'Rate limit' in _handle_api_error(self._status_error(429))

    def test_bad_key(self):
        assert 'Invalid Gemini API key' in _handle_api_error(self._status_error(403))

    def test_timeout(self):
        assert _handle_api_error(httpx.ReadTimeout('slow')) == 'Error: Request timed out.'

    def test_value_error(self):
        assert _handle_api_error(ValueError('bad input')) == 'Error: bad input'

    def test_validation_error(self):
        with pytest.raises(ValidationError) as exc:
            ProjectSettings(screen_width=-1)
        assert _handle_api_error(exc.value).startswith('Error: Invalid screen document: 1 validation error(s)')
