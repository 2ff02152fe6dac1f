import json
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from src.config import config
from src.errors import ConfigurationMissingError, InvalidInputError
from src.models.generate import ComponentSpec, ErrorResponse, GenerateRequest
from src.services.gemini_client import GeminiClient
from src.services.spec_service import generate_spec
from src.utils.logger import logger

router = APIRouter()


def get_gemini_transport() -> Optional[httpx.AsyncBaseTransport]:
    """Transport for outbound Gemini calls. None means the default network transport."""
    return None


async def _read_request(request: Request) -> GenerateRequest:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise InvalidInputError()

    try:
        req = GenerateRequest.model_validate(body)
    except ValidationError as e:
        raise InvalidInputError(details=str(e))

    if not req.prompt:
        raise InvalidInputError(message="Prompt is required.")
    return req


@router.post(
    "/generate",
    responses={
        200: {"model": list[ComponentSpec]},
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": GenerateRequest.model_json_schema()}},
        }
    },
)
async def generate(
    request: Request,
    transport: Optional[httpx.AsyncBaseTransport] = Depends(get_gemini_transport),
):
    """Generate an 8-component PC build list from a requirement and a hardware reference table."""
    api_key = config.gemini_api_key()
    if not api_key:
        logger.critical("[CRITICAL] GEMINI_API_KEY environment variable is not set.")
        raise ConfigurationMissingError()

    req = await _read_request(request)

    async with GeminiClient(api_key, transport=transport) as client:
        components = await generate_spec(req.prompt, req.hardwareData, client)

    return JSONResponse(status_code=200, content=components)
