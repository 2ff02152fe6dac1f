"""
AI PC build spec generator.
Turns a free-text requirement plus a hardware reference table into an
8-component build list using Gemini structured JSON output.
"""

import json
from typing import Any, Optional

from src.errors import EmptyGenerationError, OutputParseError
from src.services.gemini_client import GeminiClient
from src.utils.logger import logger


# Output Schema Descriptor sent as generationConfig.responseSchema
RESPONSE_SCHEMA = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "componentName": {
                "type": "STRING",
                "description": "Component name with its abbreviation, e.g. 處理器(CPU), 顯示卡(GPU).",
            },
            "componentDescription": {
                "type": "STRING",
                "description": (
                    "Recommended model, key specs and a short reason for the choice, "
                    "fully compatible with every other component."
                ),
            },
        },
        "required": ["componentName", "componentDescription"],
        "propertyOrdering": ["componentName", "componentDescription"],
    },
}

COMPONENT_CATEGORIES = (
    "motherboard (主機板)",
    "CPU (處理器)",
    "CPU cooler (散熱器)",
    "memory (記憶體)",
    "graphics card (顯示卡)",
    "storage (儲存裝置)",
    "power supply (電源供應器)",
    "case (機殼)",
)

SYSTEM_PROMPT = """You are a professional AI PC build advisor. Based on the user's requirement ({prompt}), pick the most suitable computer components from the hardware reference table provided below and output them as JSON.

1. You must output exactly 8 main components: {categories}.
2. componentName must be the component's Traditional Chinese name followed by its abbreviation (for example: 處理器(CPU)).
3. componentDescription must include the concrete model, specs and a short reason for the recommendation, and every component must be fully compatible with the others (for example: CPU and motherboard socket/chipset, motherboard and RAM generation).
4. You must strictly follow the provided JSON Schema and output only JSON, with no extra text or Markdown markup.
5. The hardware data provided is reference material; use it to put together a reasonable build."""


def build_system_prompt(prompt: str) -> str:
    return SYSTEM_PROMPT.format(prompt=prompt, categories=", ".join(COMPONENT_CATEGORIES))


def build_user_query(prompt: str, hardware_data: Optional[str]) -> str:
    return f"User requirement: {prompt}\n\nHardware reference table:\n{hardware_data or ''}"


def build_payload(prompt: str, hardware_data: Optional[str] = None) -> dict:
    """generateContent request body: user query, system instruction and schema-constrained JSON output."""
    return {
        "contents": [{"parts": [{"text": build_user_query(prompt, hardware_data)}]}],
        "systemInstruction": {"parts": [{"text": build_system_prompt(prompt)}]},
        "generationConfig": {
            "responseMimeType": "application/json",
            "responseSchema": RESPONSE_SCHEMA,
        },
    }


def extract_text(api_response: dict) -> str:
    """
    Text of the first candidate.
    Raises EmptyGenerationError when there is none, reporting why generation stopped.
    """
    if not isinstance(api_response, dict):
        api_response = {}
    candidates = api_response.get("candidates")
    candidate = candidates[0] if isinstance(candidates, list) and candidates else None
    if not isinstance(candidate, dict):
        candidate = {}

    content = candidate.get("content")
    parts = content.get("parts") if isinstance(content, dict) else None
    part = parts[0] if isinstance(parts, list) and parts else None
    text = part.get("text") if isinstance(part, dict) else None
    if isinstance(text, str) and text:
        return text

    # No candidate at all means the prompt itself was blocked
    feedback = api_response.get("promptFeedback")
    block_reason = feedback.get("blockReason") if isinstance(feedback, dict) else None
    finish_reason = candidate.get("finishReason") or block_reason or "UNKNOWN"
    safety_ratings = candidate.get("safetyRatings") or "N/A"
    logger.error(
        f"Gemini returned empty content. Finish Reason: {finish_reason}, "
        f"Safety: {json.dumps(safety_ratings, ensure_ascii=False)}"
    )
    raise EmptyGenerationError(
        f"Gemini returned empty content. Finish Reason: {finish_reason}",
        message=f"{EmptyGenerationError.default_message} (Finish Reason: {finish_reason})",
    )


def parse_components(text: str) -> Any:
    """Decode the model's JSON text. The result is returned as-is, not re-validated."""
    try:
        return json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        logger.error(f"Failed to parse Gemini output as JSON: {e}")
        raise OutputParseError(str(e)) from e


async def generate_spec(prompt: str, hardware_data: Optional[str], client: GeminiClient) -> Any:
    """Run one generation: build payload, call Gemini with retry, extract and parse the component list."""
    api_response = await client.generate_content(build_payload(prompt, hardware_data))

    components = parse_components(extract_text(api_response))

    count = len(components) if isinstance(components, list) else "n/a"
    logger.info(f"Spec generation success: components={count}")
    return components
