"""
Shared fixtures: a scripted fake Gemini endpoint and an ASGI client for the app.
"""

import json

import httpx
import pytest

from src.config import config
from src.main import app
from src.routes.generate import get_gemini_transport


COMPONENTS = [
    {"componentName": "主機板(MB)", "componentDescription": "ASUS TUF B650-PLUS WIFI, AM5, DDR5."},
    {"componentName": "處理器(CPU)", "componentDescription": "AMD Ryzen 7 7800X3D, AM5 socket."},
    {"componentName": "散熱器(Cooler)", "componentDescription": "Noctua NH-D15, fits AM5."},
    {"componentName": "記憶體(RAM)", "componentDescription": "32GB DDR5-6000 CL30 (2x16GB)."},
    {"componentName": "顯示卡(GPU)", "componentDescription": "NVIDIA GeForce RTX 4070 SUPER 12GB."},
    {"componentName": "儲存裝置(SSD)", "componentDescription": "Samsung 990 PRO 2TB NVMe PCIe 4.0."},
    {"componentName": "電源供應器(PSU)", "componentDescription": "Corsair RM850x 850W 80+ Gold."},
    {"componentName": "機殼(Case)", "componentDescription": "Fractal Design North, ATX mid tower."},
]


def gemini_envelope(text=None, finish_reason="STOP", safety_ratings=None) -> dict:
    """generateContent response with a single candidate. text=None gives an empty parts list."""
    parts = [{"text": text}] if text is not None else []
    candidate = {"content": {"parts": parts, "role": "model"}, "finishReason": finish_reason}
    if safety_ratings is not None:
        candidate["safetyRatings"] = safety_ratings
    return {"candidates": [candidate]}


def ok(text=None, **kwargs) -> httpx.Response:
    if text is None:
        text = json.dumps(COMPONENTS, ensure_ascii=False)
    return httpx.Response(200, json=gemini_envelope(text, **kwargs))


def error(status: int, message: str = "") -> httpx.Response:
    body = {"error": {"code": status, "message": message}} if message else {}
    return httpx.Response(status, json=body)


class FakeGemini:
    """Serves scripted responses in order (the last one repeats) and records every request."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        scripted = self.responses[min(len(self.requests), len(self.responses)) - 1]
        if isinstance(scripted, Exception):
            raise scripted
        # fresh Response per call, httpx responses are single-use
        return httpx.Response(
            scripted.status_code,
            headers={"content-type": scripted.headers.get("content-type", "application/json")},
            content=scripted.content,
        )

    @property
    def calls(self) -> int:
        return len(self.requests)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def api_key(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "test-key")
    return "test-key"


@pytest.fixture
def no_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)


@pytest.fixture
def no_backoff(monkeypatch):
    monkeypatch.setattr(config, "GEMINI_RETRY_BASE_DELAY", 0.0)


@pytest.fixture
def gemini():
    """Install a FakeGemini as the outbound transport: gemini(ok(), error(429), ...)."""

    def install(*responses) -> FakeGemini:
        fake = FakeGemini(*responses)
        app.dependency_overrides[get_gemini_transport] = lambda: fake.transport
        return fake

    yield install
    app.dependency_overrides.clear()


@pytest.fixture
def client() -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test")
