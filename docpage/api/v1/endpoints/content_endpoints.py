"""AI content generation endpoint"""
from fastapi import APIRouter

from docpage.errors.exceptions import MalformedModelOutputException
from docpage.schemas.content_schemas import GenerateContentRequest
from docpage.services import content_service

router = APIRouter()


@router.post("/generate-content")
async def generate_content(body: GenerateContentRequest):
    """
    ## Generate or refine page copy

    `type: "generate"` needs a `briefing`, `type: "refine"` needs an
    `instruction` plus the current content/design/visibility.

    Once the request is valid, Gemini failures (unreachable, rate limit,
    billing, other non-OK, empty or non-JSON output) come back as **200**
    `{error}`. Only a missing API key is a 500. The parsed model JSON is
    returned unchanged.
    """
    try:
        return await content_service.generate_content(body)
    except content_service.UpstreamError as e:
        return {"error": str(e)}
    except MalformedModelOutputException as e:
        return {"error": e.detail}
