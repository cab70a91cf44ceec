"""Static HTML rendering"""
import json
import re

from docpage.models.landing_page import LandingPage
from docpage.utils.static_html import (
    build_seo,
    choose_og_image,
    render_landing_page_html,
    truncate_description,
)


def _page(**fields):
    defaults = dict(
        id="page-1",
        subdomain="drsilva",
        status="published",
        briefing_data={
            "name": "Ana Silva",
            "specialty": "Cardiologia",
            "crm": "12345",
            "crmState": "SP",
            "mainServices": "Check-up, Holter, Ecocardiograma, MAPA",
        },
        content_data={"subheadline": "Cardiologia preventiva em São Paulo"},
    )
    defaults.update(fields)
    return LandingPage(**defaults)


def test_seo_uses_custom_meta_when_not_generic():
    seo = build_seo(_page(
        meta_title="Dra. Ana Silva | Cardiologista em SP",
        meta_description="Consultas e exames cardiológicos.",
        meta_keywords=["cardiologista sp", "check-up"],
    ))

    assert seo == {
        "title": "Dra. Ana Silva | Cardiologista em SP",
        "description": "Consultas e exames cardiológicos.",
        "keywords": "cardiologista sp, check-up",
    }


def test_generic_platform_meta_is_replaced_by_briefing_values():
    seo = build_seo(_page(
        meta_title="DocPage AI - Crie site profissional para médicos",
        meta_description="Plataforma para médicos com IA",
        meta_keywords=["docpage ai", "cardiologia"],
    ))

    assert seo["title"] == "Ana Silva - Cardiologia | CRM 12345/SP"
    assert seo["description"] == "Cardiologia preventiva em São Paulo"
    assert seo["keywords"].startswith("Ana Silva, Cardiologia, médico SP, CRM 12345/SP")
    assert seo["keywords"].endswith("Check-up, Holter, Ecocardiograma")


def test_description_truncation():
    assert truncate_description("x" * 160) == "x" * 160
    truncated = truncate_description("y" * 161)
    assert len(truncated) == 160
    assert truncated.endswith("...")
    assert truncated[:157] == "y" * 157


def test_og_image_priority_skips_inline_and_default_images():
    assert choose_og_image(_page(og_image_url="https://cdn/og.jpg", photo_url="https://cdn/p.jpg")) == "https://cdn/og.jpg"
    assert choose_og_image(_page(
        og_image_url="data:image/png;base64,AAAA",
        about_photo_url="https://cdn/about.jpg",
        photo_url="https://cdn/p.jpg",
    )) == "https://cdn/about.jpg"
    assert choose_og_image(_page(
        og_image_url="https://docpage.com.br/og-default.png",
        about_photo_url="data:image/jpeg;base64,BBBB",
        photo_url="https://cdn/p.jpg",
    )) == "https://cdn/p.jpg"
    assert choose_og_image(_page()).endswith("/og-default.png")


def test_every_interpolated_value_is_escaped():
    page = _page(
        meta_title='"><script>alert(1)</script>',
        briefing_data={"name": "<img src=x onerror=alert(1)>", "specialty": "A & B"},
        content_data={"subheadline": "</script><script>alert(2)</script>"},
    )

    document = render_landing_page_html(page)

    assert "<script>alert(1)</script>" not in document
    assert "<img src=x" not in document
    assert "</script><script>alert(2)" not in document
    assert "A &amp; B" in document


def test_structured_data_and_hydration_are_valid_json():
    page = _page(photo_url="data:image/png;base64,CCCC", about_photo_url="https://cdn/about.jpg")

    document = render_landing_page_html(page)

    ld = re.search(r'<script type="application/ld\+json">(.*?)</script>', document, re.S).group(1)
    schema = json.loads(ld)
    assert schema["@type"] == "Physician"
    assert schema["url"] == "https://drsilva.docpage.com.br"
    assert schema["identifier"]["value"] == "12345/SP"
    assert all(not img.startswith("data:") for img in schema["image"])

    hydration = re.search(r"window.__LANDING_PAGE_DATA__ = (.*?);</script>", document, re.S).group(1)
    data = json.loads(hydration)
    assert data["subdomain"] == "drsilva"
    assert data["photo_url"] is None
    assert data["about_photo_url"] == "https://cdn/about.jpg"
