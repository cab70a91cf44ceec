"""AI copywriting for landing pages via the Gemini generateContent API"""
import json
import logging
import re
import time
from typing import Any, Dict, Optional, Tuple

import httpx

from docpage.core.config import settings
from docpage.errors.exceptions import (
    BadRequestException,
    InternalServerException,
    MalformedModelOutputException,
)
from docpage.schemas.content_schemas import Briefing, GenerateContentRequest, GenerationType
from docpage.utils import http
from docpage.utils.logger import log_upstream_call

logger = logging.getLogger(__name__)


GENERATE_SYSTEM_PROMPT = """You are an expert medical copywriter. Create content for a high-converting landing page for a doctor.

CRITICAL COMPLIANCE RULES (CFM Resolution 2.336/2023 - STRICT):
1. NEVER use words like "Garantido", "Melhor do país", "Cura definitiva", "Sem riscos", "100% eficaz", "Milagroso".
2. Do NOT promise specific results (e.g., "Lose 10kg in 1 week").
3. Use educational and objective language (e.g., "Treatment indicated for...", "Evaluation required").
4. Call to Actions (CTA) must be neutral: "Agendar Consulta", "Marcar Avaliação", "Entrar em Contato". Do NOT use "Compre Agora".
5. In the services descriptions, explain WHAT the procedure is, do not sell the result.
6. Ensure the tone builds trust but respects medical ethics.

Keep the tone professional yet approachable."""

GENERATE_OUTPUT_SCHEMA = """{
  "headline": "A catchy main headline for the hero section",
  "subheadline": "A supporting subheadline explaining the value proposition",
  "ctaText": "Text for the main Call to Action button",
  "aboutTitle": "Title for the About Doctor section",
  "aboutBody": "Biographical text about the doctor, building trust",
  "servicesTitle": "Title for the Services section",
  "services": [{"title": "Service name", "description": "Service description"}],
  "testimonials": [{"name": "Patient name", "text": "Testimonial text"}],
  "footerText": "Footer copyright text",
  "contactEmail": "email if provided",
  "contactPhone": "phone if provided",
  "contactAddresses": ["addresses if provided"]
}"""

REFINE_SYSTEM_PROMPT = """You are an expert Landing Page Designer and Copywriter assistant.
The user wants to modify their page. You can change the TEXT content, the VISUAL DESIGN, or the VISIBILITY of sections.

Instructions:
1. Interpret the user's intent.
   - If they say "make it blue" or "round buttons", update 'design'.
   - If they say "hide testimonials", update 'visibility'.
   - If they say "rewrite the headline", update 'content'.
2. Return a JSON object with ONLY the parts that need to change.
3. If changing content, return the FULL content object with the specific fields updated.
4. If changing design or visibility, you can return partial objects.

Compliance Reminder: Do NOT allow any changes that violate medical advertising ethics (no sensationalism).

Available Design Options:
- colorPalette: blue, green, slate, rose, indigo
- secondaryColor: orange, teal, purple, gold, gray
- fontPairing: sans, serif-sans, mono-sans
- borderRadius: none, medium, full
- photoStyle: minimal, organic, framed, glass, floating, arch, rotate, collage"""

REFINE_OUTPUT_SCHEMA = """{
  "content": { /* only if content changes needed */ },
  "design": { /* only if design changes needed */ },
  "visibility": { /* only if visibility changes needed */ }
}"""

UPSTREAM_ERROR_MESSAGES = {
    429: "Gemini usage limit exceeded. Please try again later.",
    402: "Payment required on the Gemini account. Check your billing.",
}

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"```\s*$")


class UpstreamError(Exception):
    """Gemini could not be reached or answered unusably; the message is returned to the client with HTTP 200"""


def build_generate_prompt(briefing: Briefing) -> Tuple[str, str]:
    addresses = ", ".join(str(a) for a in briefing.addresses or []) or "N/A"
    user_prompt = (
        "Create content for a landing page with these details:\n"
        f"- Name: {briefing.name}\n"
        f"- Specialty: {briefing.specialty}\n"
        f"- Target Audience: {briefing.targetAudience}\n"
        f"- Services: {briefing.mainServices}\n"
        f"- Bio/Background: {briefing.bio or 'N/A'}\n"
        f"- Tone: {briefing.tone}\n"
        f"- Locations: {addresses}\n"
        "\n"
        "Return a JSON object with these fields:\n"
        f"{GENERATE_OUTPUT_SCHEMA}"
    )
    return GENERATE_SYSTEM_PROMPT, user_prompt


def build_refine_prompt(
    instruction: str,
    current_content: Any,
    current_design: Any,
    current_visibility: Any,
) -> Tuple[str, str]:
    user_prompt = (
        "Current State:\n"
        f"- Content: {json.dumps(current_content, ensure_ascii=False)}\n"
        f"- Design Settings: {json.dumps(current_design, ensure_ascii=False)}\n"
        f"- Section Visibility: {json.dumps(current_visibility, ensure_ascii=False)}\n"
        "\n"
        f'User Instruction: "{instruction}"\n'
        "\n"
        "Return a JSON object with the changes needed:\n"
        f"{REFINE_OUTPUT_SCHEMA}"
    )
    return REFINE_SYSTEM_PROMPT, user_prompt


def build_prompts(request: GenerateContentRequest) -> Tuple[str, str]:
    """Validate the request and pick the matching prompt pair"""
    if request.type not in (GenerationType.GENERATE.value, GenerationType.REFINE.value):
        raise BadRequestException(detail="Invalid operation type")

    if request.type == GenerationType.GENERATE.value:
        if request.briefing is None:
            raise BadRequestException(detail="Briefing is required for content generation")
        return build_generate_prompt(request.briefing)

    if not request.instruction:
        raise BadRequestException(detail="Instruction is required for refinement")
    return build_refine_prompt(
        request.instruction,
        request.currentContent,
        request.currentDesign,
        request.currentVisibility,
    )


def strip_code_fences(text: str) -> str:
    """Remove a ```json ... ``` or ``` ... ``` wrapper around the model output"""
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned)
        cleaned = _FENCE_CLOSE.sub("", cleaned)
    return cleaned.strip()


def parse_model_output(text: str) -> Any:
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error(f"Gemini output is not valid JSON: {str(e)} | {cleaned[:200]}")
        raise MalformedModelOutputException()


def _extract_text(payload: Dict[str, Any]) -> Optional[str]:
    try:
        return payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError):
        return None


async def call_gemini(system_prompt: str, user_prompt: str) -> str:
    """
    POST the combined prompt and return the first candidate's text.

    Raises InternalServerException when the key is missing and UpstreamError
    when the call fails, answers non-OK or carries no text.
    """
    if not settings.GEMINI_API_KEY:
        raise InternalServerException(detail="GEMINI_API_KEY is not configured")

    url = f"{settings.GEMINI_API_URL.rstrip('/')}/models/{settings.GEMINI_MODEL}:generateContent"
    body = {
        "contents": [
            {"role": "user", "parts": [{"text": f"{system_prompt}\n\n{user_prompt}"}]},
        ],
    }

    try:
        async with http.get_http_client() as client:
            started = time.monotonic()
            response = await client.post(url, params={"key": settings.GEMINI_API_KEY}, json=body)
            log_upstream_call("Gemini", response.status_code, time.monotonic() - started, settings.GEMINI_MODEL)
    except httpx.HTTPError as e:
        logger.error(f"Gemini request failed: {str(e)}")
        raise UpstreamError(f"Gemini request failed: {str(e) or type(e).__name__}") from e

    if not response.is_success:
        logger.error(f"Gemini API error: {response.status_code} {response.text[:500]}")
        message = UPSTREAM_ERROR_MESSAGES.get(
            response.status_code, f"Gemini API error: {response.status_code}"
        )
        raise UpstreamError(message)

    try:
        payload = response.json()
    except ValueError:
        raise MalformedModelOutputException(detail="Gemini response body is not JSON")

    text = _extract_text(payload)
    if not text:
        raise UpstreamError("Gemini returned no content")
    return text


async def generate_content(request: GenerateContentRequest) -> Any:
    """Build the prompt, call Gemini and return the parsed JSON verbatim"""
    system_prompt, user_prompt = build_prompts(request)
    text = await call_gemini(system_prompt, user_prompt)
    return parse_model_output(text)
