#!/usr/bin/env python3
"""
FlowGUI MCP Server - Model Context Protocol server for the FlowGUI screen builder.

This server exposes the FlowGUI code generator and its collaborators:
- Java screen code generation for Fabric, Forge, NeoForge, Quilt and LWJGL 2 clients
- Dialect inspection (imports, signatures and widget classes per loader/version)
- Screen storage (save, list, remove screen documents)
- AI design review of a screen layout (Gemini)
"""

import os
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any
from enum import Enum

import httpx
from pydantic import BaseModel, Field, field_validator, model_validator, ConfigDict, ValidationError
from mcp.server.fastmcp import FastMCP

from generators.base import DuplicateIdentifierError
from generators.dialects import resolve_dialect
from generators.java_generator import generate_java_code
from generators.models import (
    McVersion, ModLoader, ProjectSettings, Screen, ScreenRef, parse_elements,
)

# ============================================================================
# Constants
# ============================================================================

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_MODEL = "gemini-2.5-flash"
CHARACTER_LIMIT = 25000
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)

# ============================================================================
# Initialize MCP Server
# ============================================================================

mcp = FastMCP("flowgui_mcp")

# ============================================================================
# Enums and Types
# ============================================================================

class ResponseFormat(str, Enum):
    """Output format for tool responses."""
    MARKDOWN = "markdown"
    JSON = "json"


# ============================================================================
# Pydantic Input Models
# ============================================================================

class GenerateCodeInput(BaseModel):
    """Input model for code generation."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    screen_id: Optional[str] = Field(
        default=None,
        description="ID of a stored screen to generate (takes precedence over elements/settings)"
    )
    elements: List[Dict[str, Any]] = Field(
        default_factory=list,
        description="Screen elements in z-order, in the editor's JSON shape"
    )
    settings: Optional[ProjectSettings] = Field(
        default=None,
        description="Project settings: loader, version, className, screenWidth, screenHeight, responsive"
    )
    screens: List[ScreenRef] = Field(
        default_factory=list,
        description="Sibling screens ({id, className}) for OPEN_SCREEN actions"
    )
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )

    @model_validator(mode='after')
    def require_source(self) -> 'GenerateCodeInput':
        if not self.screen_id and self.settings is None:
            raise ValueError("Provide either screen_id or settings")
        return self


class DialectInput(BaseModel):
    """Input model for dialect inspection."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    loader: ModLoader = Field(default=ModLoader.FABRIC, description="Target loader")
    version: McVersion = Field(default=McVersion.V1_20_4, description="Target game version")
    response_format: ResponseFormat = Field(
        default=ResponseFormat.MARKDOWN,
        description="Output format: 'markdown' or 'json'"
    )


class SaveScreenInput(BaseModel):
    """Input model for storing a screen document."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    screen: Screen = Field(..., description="Screen document {id, name, elements, settings}")


class ScreenIdInput(BaseModel):
    """Input model for screen lookups and removal."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    screen_id: str = Field(..., description="Stored screen ID", min_length=1)


class ListScreensInput(BaseModel):
    """Input model for listing stored screens."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    loader: Optional[ModLoader] = Field(default=None, description="Only screens targeting this loader")


class AnalyzeGuiInput(BaseModel):
    """Input model for AI layout review."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    screen_id: Optional[str] = Field(default=None, description="ID of a stored screen to review")
    elements: List[Dict[str, Any]] = Field(default_factory=list, description="Screen elements")
    settings: Optional[ProjectSettings] = Field(default=None, description="Project settings")

    @field_validator('elements')
    @classmethod
    def limit_elements(cls, v: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        if len(v) > 500:
            raise ValueError("Too many elements for a review (max 500)")
        return v

    @model_validator(mode='after')
    def require_source(self) -> 'AnalyzeGuiInput':
        if not self.screen_id and self.settings is None:
            raise ValueError("Provide either screen_id or settings")
        return self


# ============================================================================
# Helper Functions
# ============================================================================

# Screen storage configuration
SCREEN_STORE_DEFAULT_PATH = os.path.expanduser(
    "~/.config/flowgui-mcp/screens.json"
)


def _get_screen_store_path() -> str:
    """Get the path to the screen storage file."""
    return os.environ.get("FLOWGUI_SCREENS_PATH", SCREEN_STORE_DEFAULT_PATH)


def _load_screen_store() -> Dict[str, Any]:
    """Load stored screens from the storage file."""
    path = _get_screen_store_path()
    if os.path.exists(path):
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (json.JSONDecodeError, IOError):
            logger.warning("Screen store at %s is unreadable, starting empty", path)
            return {"version": "1.0", "screens": {}}
    return {"version": "1.0", "screens": {}}


def _save_screen_store(data: Dict[str, Any]) -> None:
    """Save screens to the storage file."""
    path = _get_screen_store_path()
    os.makedirs(os.path.dirname(path) or '.', exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)


def _stored_screen(data: Dict[str, Any], screen_id: str) -> Optional[Screen]:
    entry = data.get("screens", {}).get(screen_id)
    if entry is None:
        return None
    return Screen.model_validate(entry["screen"])


def _stored_refs(data: Dict[str, Any]) -> List[ScreenRef]:
    return [Screen.model_validate(entry["screen"]).ref() for entry in data.get("screens", {}).values()]


def _get_current_timestamp() -> str:
    """Get current UTC timestamp in ISO format."""
    return datetime.now(timezone.utc).isoformat()


def _get_gemini_key() -> str:
    """Get Gemini API key from environment."""
    key = os.environ.get("GEMINI_API_KEY") or os.environ.get("API_KEY")
    if not key:
        raise ValueError(
            "Gemini API key not found. Set GEMINI_API_KEY or API_KEY environment variable."
        )
    return key


def _get_gemini_model() -> str:
    return os.environ.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)


async def _make_gemini_request(prompt: str) -> Dict[str, Any]:
    """Send one prompt to the Gemini generateContent endpoint."""
    key = _get_gemini_key()

    async with httpx.AsyncClient() as client:
        response = await client.post(
            f"{GEMINI_API_BASE}/models/{_get_gemini_model()}:generateContent",
            headers={"x-goog-api-key": key},
            json={"contents": [{"parts": [{"text": prompt}]}]},
            timeout=DEFAULT_TIMEOUT
        )
        response.raise_for_status()
        return response.json()


def _extract_gemini_text(data: Dict[str, Any]) -> str:
    """Pull the first candidate's text out of a generateContent response."""
    for candidate in data.get('candidates', []):
        parts = candidate.get('content', {}).get('parts', [])
        text = ''.join(part.get('text', '') for part in parts)
        if text:
            return text
    return "No response generated."


def _handle_api_error(e: Exception) -> str:
    """Format errors for user-friendly messages."""
    if isinstance(e, httpx.HTTPStatusError):
        status = e.response.status_code
        if status in (401, 403):
            return "Error: Invalid Gemini API key. Check your GEMINI_API_KEY environment variable."
        elif status == 404:
            return f"Error: Gemini model '{_get_gemini_model()}' not found."
        elif status == 429:
            return "Error: Rate limit exceeded. Please wait before making more requests."
        return f"Error: Gemini API returned status {status}"
    elif isinstance(e, httpx.TimeoutException):
        return "Error: Request timed out."
    elif isinstance(e, DuplicateIdentifierError):
        return f"Error: {str(e)}"
    elif isinstance(e, ValidationError):
        return f"Error: Invalid screen document: {e.error_count()} validation error(s)\n{str(e)}"
    elif isinstance(e, ValueError):
        return f"Error: {str(e)}"
    return f"Error: {type(e).__name__}: {str(e)}"


def _build_analysis_prompt(elements: List[Any], settings: ProjectSettings) -> str:
    """Summarize a layout into the review prompt sent to the model."""
    summary = []
    for el in parse_elements(elements):
        details = f"Pos({el.x:g},{el.y:g}), Size({el.width:g}x{el.height:g})"
        label = getattr(el, 'label', '')
        if label:
            details += f', Label("{label}")'
        radius = getattr(el, 'border_radius', 0)
        if radius:
            details += f", Radius({radius:g})"
        if el.opacity:
            details += f", Opacity({el.opacity:g})"
        summary.append(f"- {el.type} (ID: {el.variable_name}): {details}")

    profile = resolve_dialect(settings.loader, settings.version)
    if profile.is_immediate_mode:
        focus = "Focus on raw GL11 calls, VBOs, or legacy Gui methods."
    else:
        focus = f"Focus on {profile.context_type}."
    mode = 'ENABLED' if settings.responsive else 'DISABLED'
    wants = 'wants' if settings.responsive else 'does NOT want'

    return "\n".join([
        "You are an expert Minecraft Mod Developer.",
        f"The user is working with: {settings.loader.value} for version {settings.version.value}.",
        f'They have "Adaptive Resolution" mode {mode}.',
        "",
        "GUI Elements:",
        "\n".join(summary) or "(no elements)",
        "",
        "Please provide a technical review:",
        f"1. **Implementation Details**: How to implement this in {settings.loader.value}? {focus}",
        f"2. **Responsiveness**: The user {wants} the GUI to adapt to screen size. "
        "Review the logic for calculating X/Y positions based on `this.width` and `this.height`.",
        "3. **Modern Aesthetics**: If they used rounded corners or transparency, explain the specific "
        f"GL calls (e.g. `glBlendFunc`) or shaders needed for {settings.version.value}.",
        "",
        "Keep the tone helpful, technical and concise.",
    ])


def _format_profile_markdown(summary: Dict[str, Any]) -> str:
    lines = [
        f"# Dialect: {summary['loader']} {summary['version']}",
        f"**Family:** {summary['family']}",
        f"**Transform:** {summary['transform_style']}",
        f"**Base class:** `{summary['base_class']}`",
    ]
    if summary['annotation']:
        lines.append(f"**Annotation:** `{summary['annotation']}`")
    if summary['context']:
        lines.append(f"**Draw context:** `{summary['context']}`")
    lines += [
        f"**init:** `{summary['init_signature']}`",
        f"**render:** `{summary['render_signature']}`",
        "",
        "## Widget Classes",
        "",
    ]
    for element_type, widget in summary['widget_classes'].items():
        lines.append(f"- {element_type}: `{widget}`" if widget else f"- {element_type}: drawn by hand")
    lines += ["", "## Imports", ""]
    lines += [f"- `{name}`" for name in summary['imports']]
    return "\n".join(lines)


# ============================================================================
# Code Generation Tools
# ============================================================================

@mcp.tool(
    name="flowgui_generate_code",
    annotations={
        "title": "Generate Java Screen Code",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def flowgui_generate_code(params: GenerateCodeInput) -> str:
    """
    Generate a Java screen class from a FlowGUI screen document.

    Emits imports, the client-side annotation, field declarations, constructor,
    init() and render() for the loader/version in the settings. Output is
    deterministic: the same document always yields the same source.

    Args:
        params: GenerateCodeInput containing:
            - screen_id (Optional[str]): Stored screen to generate
            - elements (List[Dict]): Elements in z-order (when no screen_id)
            - settings (ProjectSettings): Loader, version, class name, canvas size
            - screens (List[ScreenRef]): Sibling screens for OPEN_SCREEN actions
            - response_format: 'markdown' or 'json'

    Returns:
        str: Generated Java source in the requested format
    """
    try:
        if params.screen_id:
            store = _load_screen_store()
            screen = _stored_screen(store, params.screen_id)
            if screen is None:
                return f"Error: Screen '{params.screen_id}' not found."
            elements, settings = screen.typed_elements(), screen.settings
            refs = _stored_refs(store) + list(params.screens)
        else:
            elements, settings, refs = params.elements, params.settings, list(params.screens)

        code = generate_java_code(elements, settings, refs)
        profile = resolve_dialect(settings.loader, settings.version)

        if params.response_format == ResponseFormat.JSON:
            return json.dumps({
                'class_name': settings.class_name,
                'loader': settings.loader.value,
                'version': settings.version.value,
                'family': profile.family.value,
                'code': code
            }, indent=2)

        lines = [
            f"# Generated Code: {settings.class_name}",
            f"**Target:** {settings.loader.value} {settings.version.value} ({profile.family.value})",
            f"**Elements:** {len(elements)}",
            "",
            "```java",
            code,
            "```"
        ]
        result = "\n".join(lines)
        if len(result) > CHARACTER_LIMIT:
            return result[:CHARACTER_LIMIT] + "\n\n... (truncated)"
        return result

    except Exception as e:
        return _handle_api_error(e)


@mcp.tool(
    name="flowgui_get_dialect",
    annotations={
        "title": "Describe Target Dialect",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def flowgui_get_dialect(params: DialectInput) -> str:
    """
    Describe how code is generated for a loader/version pair.

    Args:
        params: DialectInput containing:
            - loader: Fabric, Forge, NeoForge, Quilt or 'Client (LWJGL 2)'
            - version: Game version tag
            - response_format: 'markdown' or 'json'

    Returns:
        str: Dialect family, signatures, widget classes and imports
    """
    try:
        summary = resolve_dialect(params.loader, params.version).summary()
        if params.response_format == ResponseFormat.JSON:
            return json.dumps(summary, indent=2)
        return _format_profile_markdown(summary)
    except Exception as e:
        return _handle_api_error(e)


# ============================================================================
# Screen Storage Tools
# ============================================================================

@mcp.tool(
    name="flowgui_list_screens",
    annotations={
        "title": "List Stored Screens",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def flowgui_list_screens(params: ListScreensInput) -> str:
    """
    List stored screen documents.

    Args:
        params: ListScreensInput containing:
            - loader (Optional[ModLoader]): Only screens for this loader

    Returns:
        str: JSON formatted screen summaries
    """
    try:
        data = _load_screen_store()
        screens = []
        for screen_id, entry in data.get("screens", {}).items():
            screen = Screen.model_validate(entry["screen"])
            if params.loader and screen.settings.loader != params.loader:
                continue
            screens.append({
                "id": screen_id,
                "name": screen.name,
                "class_name": screen.settings.class_name,
                "loader": screen.settings.loader.value,
                "version": screen.settings.version.value,
                "element_count": len(screen.elements),
                "updated_at": entry.get("updated_at")
            })

        return json.dumps({
            "status": "success",
            "screens": screens,
            "count": len(screens)
        }, indent=2)

    except Exception as e:
        return json.dumps({
            "status": "error",
            "message": str(e)
        }, indent=2)


@mcp.tool(
    name="flowgui_save_screen",
    annotations={
        "title": "Save Screen",
        "readOnlyHint": False,
        "destructiveHint": False,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def flowgui_save_screen(params: SaveScreenInput) -> str:
    """
    Add or update a stored screen document.

    Editor-only state (undo history, clipboard) is not stored.

    Args:
        params: SaveScreenInput containing:
            - screen (Screen): {id, name, elements, settings}

    Returns:
        str: JSON formatted result with status
    """
    try:
        data = _load_screen_store()
        screens = data.setdefault("screens", {})
        screen = params.screen

        is_update = screen.id in screens
        timestamp = _get_current_timestamp()
        entry = {
            "screen": screen.model_dump(mode='json', by_alias=True),
            "updated_at": timestamp
        }
        if is_update:
            entry["created_at"] = screens[screen.id].get("created_at", timestamp)
        else:
            entry["created_at"] = timestamp

        screens[screen.id] = entry
        _save_screen_store(data)

        action = "updated" if is_update else "added"
        return json.dumps({
            "status": "success",
            "action": action,
            "screen_id": screen.id,
            "class_name": screen.settings.class_name,
            "message": f"Screen '{screen.name}' {action} successfully."
        }, indent=2)

    except Exception as e:
        return json.dumps({
            "status": "error",
            "message": str(e)
        }, indent=2)


@mcp.tool(
    name="flowgui_remove_screen",
    annotations={
        "title": "Remove Screen",
        "readOnlyHint": False,
        "destructiveHint": True,
        "idempotentHint": True,
        "openWorldHint": False
    }
)
async def flowgui_remove_screen(params: ScreenIdInput) -> str:
    """
    Remove a stored screen document.

    OPEN_SCREEN actions in other screens that pointed at it keep working: they
    fall back to the stored reference value.

    Args:
        params: ScreenIdInput containing:
            - screen_id (str): Screen to remove

    Returns:
        str: JSON formatted result with status
    """
    try:
        data = _load_screen_store()
        screens = data.get("screens", {})

        if params.screen_id not in screens:
            return json.dumps({
                "status": "not_found",
                "screen_id": params.screen_id,
                "message": f"No screen found with ID '{params.screen_id}'."
            }, indent=2)

        removed = screens.pop(params.screen_id)
        _save_screen_store(data)

        return json.dumps({
            "status": "success",
            "action": "removed",
            "screen_id": params.screen_id,
            "removed_screen": removed["screen"].get("name"),
            "message": f"Screen '{params.screen_id}' removed successfully."
        }, indent=2)

    except Exception as e:
        return json.dumps({
            "status": "error",
            "message": str(e)
        }, indent=2)


# ============================================================================
# AI Review Tool
# ============================================================================

@mcp.tool(
    name="flowgui_analyze_gui",
    annotations={
        "title": "AI Review of a Screen Layout",
        "readOnlyHint": True,
        "destructiveHint": False,
        "idempotentHint": False,
        "openWorldHint": True
    }
)
async def flowgui_analyze_gui(params: AnalyzeGuiInput) -> str:
    """
    Ask Gemini for a technical review of a screen layout.

    Requires GEMINI_API_KEY (or API_KEY). The model can be changed with GEMINI_MODEL.

    Args:
        params: AnalyzeGuiInput containing:
            - screen_id (Optional[str]): Stored screen to review
            - elements (List[Dict]): Elements (when no screen_id)
            - settings (ProjectSettings): Target loader/version and responsiveness

    Returns:
        str: Markdown review text
    """
    try:
        if params.screen_id:
            screen = _stored_screen(_load_screen_store(), params.screen_id)
            if screen is None:
                return f"Error: Screen '{params.screen_id}' not found."
            elements, settings = screen.typed_elements(), screen.settings
        else:
            elements, settings = params.elements, params.settings

        prompt = _build_analysis_prompt(elements, settings)
        data = await _make_gemini_request(prompt)
        return _extract_gemini_text(data)

    except Exception as e:
        logger.error("Layout review failed: %s", e)
        return _handle_api_error(e)


# ============================================================================
# Entry Point
# ============================================================================

def main() -> None:
    # stdout carries the MCP transport; logs go to stderr
    logging.basicConfig(
        level=os.environ.get("FLOWGUI_LOG_LEVEL", "INFO"),
        format='%(levelname)s: [%(name)s] %(message)s',
        stream=sys.stderr
    )
    mcp.run()


if __name__ == "__main__":
    main()
