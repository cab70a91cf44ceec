"""Render a published landing page as a standalone, SEO-ready HTML document"""
import json
from datetime import datetime, timezone
from html import escape
from typing import Any, Dict, List, Optional

from docpage.core.config import settings
from docpage.models.landing_page import LandingPage

MAX_DESCRIPTION_LENGTH = 160

# Fragments that mark a meta value as the platform's own marketing copy
GENERIC_META_MARKERS = (
    "docpage ai",
    "crie site profissional para médicos",
    "seo otimizado",
    "com ia",
    "teste grátis",
    "plataforma para médicos",
)

DEFAULT_OG_IMAGE = "og-default.png"


def is_generic_meta(value: Optional[str]) -> bool:
    if not value:
        return False
    lower = value.lower()
    return any(marker in lower for marker in GENERIC_META_MARKERS)


def _is_inline_image(url: Optional[str]) -> bool:
    return bool(url) and url.startswith("data:")


def truncate_description(text: str) -> str:
    if len(text) > MAX_DESCRIPTION_LENGTH:
        return text[:MAX_DESCRIPTION_LENGTH - 3] + "..."
    return text


def page_url(page: LandingPage) -> str:
    return f"https://{page.site_domain}"


def _crm(briefing: Dict[str, Any]) -> str:
    return f"CRM {briefing.get('crm') or ''}/{briefing.get('crmState') or ''}"


def build_seo(page: LandingPage) -> Dict[str, str]:
    """Title, description and keywords, ignoring the platform's generic meta values"""
    briefing = page.briefing_data or {}
    content = page.content_data or {}
    name = briefing.get("name") or "Médico"
    specialty = briefing.get("specialty") or "Especialista"
    state = briefing.get("crmState") or ""

    if page.meta_title and not is_generic_meta(page.meta_title):
        title = page.meta_title
    else:
        title = f"{name} - {specialty} | {_crm(briefing)}"

    if page.meta_description and not is_generic_meta(page.meta_description):
        description = page.meta_description
    else:
        description = content.get("subheadline") or (
            f"Dr(a). {name}, {specialty} - {_crm(briefing)}. {state}. Agende sua consulta online."
        )

    keywords_list = page.meta_keywords or []
    if keywords_list and not any(is_generic_meta(k) for k in keywords_list):
        keywords = ", ".join(keywords_list)
    else:
        services = [s.strip() for s in (briefing.get("mainServices") or "").split(",") if s.strip()][:3]
        keywords = ", ".join([
            name, specialty, f"médico {state}".strip(), _crm(briefing),
            "consulta médica", "agendar consulta", *services,
        ])

    return {
        "title": title,
        "description": truncate_description(description),
        "keywords": keywords,
    }


def choose_og_image(page: LandingPage) -> str:
    """og_image_url, then about photo, then photo, then the default image; inline data URLs never qualify"""
    og = page.og_image_url
    if og and DEFAULT_OG_IMAGE not in og and not _is_inline_image(og):
        return og
    for candidate in (page.about_photo_url, page.photo_url):
        if candidate and not _is_inline_image(candidate):
            return candidate
    return f"{settings.SITE_BASE_URL.rstrip('/')}/{DEFAULT_OG_IMAGE}"


def build_schema_markup(page: LandingPage, description: str, og_image: str) -> Dict[str, Any]:
    """schema.org Physician record"""
    briefing = page.briefing_data or {}
    content = page.content_data or {}
    url = page_url(page)
    name = briefing.get("name") or "Médico"
    state = briefing.get("crmState") or ""

    images: List[str] = [og_image]
    for extra in (page.photo_url, page.about_photo_url):
        if extra and not _is_inline_image(extra) and extra not in images:
            images.append(extra)

    schema: Dict[str, Any] = {
        "@context": "https://schema.org",
        "@type": "Physician",
        "@id": url,
        "name": name,
        "alternateName": f"Dr(a). {name}",
        "description": description,
        "image": images,
        "url": url,
        "medicalSpecialty": {
            "@type": "MedicalSpecialty",
            "name": briefing.get("specialty") or "Especialista",
        },
        "identifier": {
            "@type": "PropertyValue",
            "name": "CRM",
            "value": f"{briefing.get('crm') or ''}/{state}",
        },
        "areaServed": {"@type": "State", "name": state},
    }

    telephone = briefing.get("contactPhone") or content.get("contactPhone")
    if telephone:
        schema["telephone"] = telephone
    email = briefing.get("contactEmail") or content.get("contactEmail")
    if email:
        schema["email"] = email

    addresses = briefing.get("addresses") or []
    if addresses:
        schema["address"] = [
            {
                "@type": "PostalAddress",
                "streetAddress": addr,
                "addressLocality": state,
                "addressCountry": "BR",
            }
            for addr in addresses
        ]
    return schema


def _json_for_script(data: Any) -> str:
    """JSON safe to embed in a <script> block"""
    return (
        json.dumps(data, ensure_ascii=False, default=str)
        .replace("<", "\\u003c")
        .replace(">", "\\u003e")
        .replace("&", "\\u0026")
    )


def hydration_payload(page: LandingPage) -> Dict[str, Any]:
    return {
        "id": page.id,
        "subdomain": page.subdomain,
        "custom_domain": page.custom_domain,
        "status": page.status,
        "briefing_data": page.briefing_data or {},
        "content_data": page.content_data or {},
        "design_data": page.design_data or {},
        "visibility_data": page.visibility_data or {},
        "photo_url": None if _is_inline_image(page.photo_url) else page.photo_url,
        "about_photo_url": None if _is_inline_image(page.about_photo_url) else page.about_photo_url,
        "published_at": page.published_at.isoformat() if page.published_at else None,
    }


def render_landing_page_html(page: LandingPage) -> str:
    """Build the full document for *page*. All interpolated text is HTML-escaped."""
    briefing = page.briefing_data or {}
    content = page.content_data or {}
    seo = build_seo(page)
    og_image = choose_og_image(page)
    url = page_url(page)

    name = briefing.get("name") or "Médico"
    specialty = briefing.get("specialty") or "Especialista"
    site_name = f"Dr(a). {name} - {specialty} | {_crm(briefing)}"
    year = datetime.now(timezone.utc).year

    contact_meta = []
    if briefing.get("contactPhone"):
        contact_meta.append(f'<meta property="og:phone_number" content="{escape(str(briefing["contactPhone"]))}" />')
    if briefing.get("contactEmail"):
        contact_meta.append(f'<meta property="og:email" content="{escape(str(briefing["contactEmail"]))}" />')

    schema = build_schema_markup(page, seo["description"], og_image)
    subheadline = content.get("subheadline") or specialty

    return f"""<!DOCTYPE html>
<html lang="pt-BR">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0, maximum-scale=5.0, user-scalable=yes" />
    <title>{escape(seo["title"])}</title>
    <meta name="description" content="{escape(seo["description"])}" />
    <meta name="keywords" content="{escape(seo["keywords"])}" />
    <meta name="author" content="{escape(name)}" />
    <meta name="robots" content="index, follow, max-image-preview:large, max-snippet:-1, max-video-preview:-1" />
    <meta name="language" content="pt-BR" />
    <meta name="copyright" content="© {year} {escape(name)}" />
    <meta name="geo.region" content="BR-{escape(briefing.get("crmState") or "")}" />

    <meta property="og:title" content="{escape(seo["title"])}" />
    <meta property="og:description" content="{escape(seo["description"])}" />
    <meta property="og:image" content="{escape(og_image)}" />
    <meta property="og:image:secure_url" content="{escape(og_image.replace("http://", "https://"))}" />
    <meta property="og:image:width" content="1200" />
    <meta property="og:image:height" content="630" />
    <meta property="og:url" content="{escape(url)}" />
    <meta property="og:type" content="website" />
    <meta property="og:site_name" content="{escape(site_name)}" />
    <meta property="og:locale" content="pt_BR" />
    {"".join(contact_meta)}

    <meta name="twitter:card" content="summary_large_image" />
    <meta name="twitter:title" content="{escape(seo["title"])}" />
    <meta name="twitter:description" content="{escape(seo["description"])}" />
    <meta name="twitter:image" content="{escape(og_image)}" />
    <meta name="twitter:domain" content="{escape(page.site_domain)}" />

    <link rel="canonical" href="{escape(url)}" />
    <script type="application/ld+json">{_json_for_script(schema)}</script>
  </head>
  <body>
    <div id="root">
      <main>
        <h1>{escape(name)}</h1>
        <p>{escape(subheadline)}</p>
      </main>
    </div>
    <script>window.__LANDING_PAGE_DATA__ = {_json_for_script(hydration_payload(page))};</script>
  </body>
</html>
"""
