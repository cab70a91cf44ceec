"""generate-content"""
import json

import httpx
import pytest

from docpage.core.config import settings
from docpage.services.content_service import strip_code_fences

GENERATE = "/functions/v1/generate-content"

BRIEFING = {
    "name": "Ana Silva",
    "specialty": "Cardiologia",
    "targetAudience": "Adultos",
    "mainServices": "Check-up",
    "tone": "profissional",
    "addresses": ["Av. Paulista, 1000"],
}


def _gemini(text=None, status=200):
    def handler(request):
        if status != 200:
            return httpx.Response(status, text="upstream says no")
        return httpx.Response(200, json={"candidates": [{"content": {"parts": [{"text": text}]}}]})
    return handler


def test_fenced_json_is_unwrapped_and_returned_verbatim(client, mock_http):
    generated = {"headline": "Cuidado com o seu coração", "services": [{"title": "Check-up"}]}
    requests = mock_http(_gemini("```json\n" + json.dumps(generated) + "\n```"))

    response = client.post(GENERATE, json={"type": "generate", "briefing": BRIEFING})

    assert response.status_code == 200
    assert response.json() == generated

    request = requests[0]
    assert request.url.path == f"/v1/models/{settings.GEMINI_MODEL}:generateContent"
    assert request.url.params["key"] == "test-gemini-key"
    prompt = json.loads(request.content)["contents"][0]["parts"][0]["text"]
    assert "CFM Resolution" in prompt
    assert "- Name: Ana Silva" in prompt
    assert "- Locations: Av. Paulista, 1000" in prompt


def test_refine_prompt_carries_current_state(client, mock_http):
    requests = mock_http(_gemini('{"design": {"colorPalette": "blue"}}'))

    response = client.post(GENERATE, json={
        "type": "refine",
        "instruction": "deixe azul",
        "currentContent": {"headline": "Olá"},
        "currentDesign": {"colorPalette": "green"},
        "currentVisibility": {"testimonials": True},
    })

    assert response.json() == {"design": {"colorPalette": "blue"}}
    prompt = json.loads(requests[0].content)["contents"][0]["parts"][0]["text"]
    assert 'User Instruction: "deixe azul"' in prompt
    assert '"colorPalette": "green"' in prompt
    assert "Available Design Options" in prompt


@pytest.mark.parametrize("payload", [
    {},
    {"type": "rewrite"},
    {"type": "generate"},
    {"type": "refine"},
    {"type": "refine", "instruction": ""},
])
def test_bad_requests_are_400(client, mock_http, payload):
    requests = mock_http(_gemini("{}"))

    response = client.post(GENERATE, json=payload)

    assert response.status_code == 400
    assert response.json()["error"]
    assert requests == []


@pytest.mark.parametrize("status, fragment", [
    (429, "limit"),
    (402, "Payment required"),
    (503, "Gemini API error: 503"),
])
def test_upstream_errors_come_back_as_200(client, mock_http, status, fragment):
    mock_http(_gemini(status=status))

    response = client.post(GENERATE, json={"type": "generate", "briefing": BRIEFING})

    assert response.status_code == 200
    assert fragment in response.json()["error"]


def test_empty_model_text_comes_back_as_200(client, mock_http):
    mock_http(_gemini(""))

    response = client.post(GENERATE, json={"type": "generate", "briefing": BRIEFING})

    assert response.status_code == 200
    assert response.json() == {"error": "Gemini returned no content"}


def test_unparseable_model_output_comes_back_as_200(client, mock_http):
    mock_http(_gemini("Here is your page: {headline: nope"))

    response = client.post(GENERATE, json={"type": "generate", "briefing": BRIEFING})

    assert response.status_code == 200
    assert response.json() == {"error": "Gemini response is not valid JSON"}


def test_unreachable_gemini_comes_back_as_200(client, mock_http):
    def down(request):
        raise httpx.ConnectError("connection refused", request=request)

    mock_http(down)

    response = client.post(GENERATE, json={"type": "generate", "briefing": BRIEFING})

    assert response.status_code == 200
    assert response.json()["error"].startswith("Gemini request failed")


def test_missing_api_key_is_500(client, mock_http, monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_API_KEY", "")
    requests = mock_http(_gemini("{}"))

    response = client.post(GENERATE, json={"type": "generate", "briefing": BRIEFING})

    assert response.status_code == 500
    assert response.json()["error"] == "GEMINI_API_KEY is not configured"
    assert requests == []


@pytest.mark.parametrize("raw", [
    '```json\n{"a": 1}\n```',
    '```JSON {"a": 1}```',
    '```\n{"a": 1}\n```',
    '  {"a": 1}  ',
])
def test_strip_code_fences(raw):
    assert json.loads(strip_code_fences(raw)) == {"a": 1}
