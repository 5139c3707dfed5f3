"""AI routes: generate a draft article and regenerate an article's illustration."""

import json
import logging

from fastapi import APIRouter, Depends
from openai import OpenAIError
from sqlalchemy.orm import Session

from journal.shared.database import get_db
from journal.shared.errors import validation_error, not_found, upstream_failure, internal_error
from journal.shared.input_validation import sanitize_topic
from journal.auth.database import AdminUser
from journal.auth.dependencies import get_current_admin
from journal.articles.database import Article
from journal.articles.service import get_article
from journal.articles.slugs import slug_or_random, insert_with_unique_slug
from journal.images.provenance import ensure_durable, fallback_image, assert_durable
from journal.ai.client import get_openai_client, OpenAINotConfiguredError
from journal.ai.extraction import fetch_source_text
from journal.ai.prompts import article_messages, image_prompt
from journal.ai.schemas import GenerateRequest, GenerateResponse, RegenerateImageResponse

router = APIRouter(prefix="/api/admin/ai", tags=["ai"])

TEXT_MODEL = "gpt-4o-mini"
IMAGE_MODEL = "dall-e-3"
AI_PROVIDER = "openai"
FALLBACK_WARNING = "OpenAI generation failed; using fallback image"


def _client():
    try:
        return get_openai_client()
    except OpenAINotConfiguredError as e:
        raise internal_error(str(e))


def _parse_article_json(content) -> dict:
    try:
        parsed = json.loads(content or "{}")
    except ValueError:
        logging.warning("AI response was not valid JSON, using defaults")
        return {}
    return parsed if isinstance(parsed, dict) else {}


def generate_image(client, prompt: str) -> str:
    """Ask the image model for one 1024x1024 illustration and return its (temporary) URL."""
    result = client.images.generate(
        model=IMAGE_MODEL,
        prompt=prompt,
        size="1024x1024",
        quality="hd",
        style="natural",
        n=1,
    )
    url = result.data[0].url if result.data else None
    if not url:
        raise ValueError("No image URL returned from OpenAI")
    return url


def illustrate(client, prompt: str, identifier: str) -> str:
    """Generate an illustration and re-host it; any failure yields the fallback image."""
    try:
        temporary_url = generate_image(client, prompt)
    except Exception as e:
        logging.error(f"Image generation failed for {identifier}: {str(e)}")
        return fallback_image(identifier)
    return ensure_durable(temporary_url, identifier)


# AI handlers are plain functions so FastAPI runs them in its threadpool; the OpenAI,
# httpx and Cloudinary calls block.
@router.post("/generate", response_model=GenerateResponse)
def generate_article(
    payload: GenerateRequest,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """
    Generate a draft article with the text model and illustrate it.

    The article is saved as a draft flagged ``ai_generated`` under the first
    free slug derived from its title. A failed illustration never blocks the
    draft; a failed text generation does.
    """
    category = (payload.category or "").strip()
    if not category:
        raise validation_error("category is required")

    topic = sanitize_topic(payload.topic)
    if topic is None:
        raise validation_error("Invalid topic")

    client = _client()
    source_url = (payload.source_url or "").strip()
    source_text = fetch_source_text(source_url) if source_url else ""

    try:
        completion = client.chat.completions.create(
            model=TEXT_MODEL,
            messages=article_messages(category, topic, payload.mode, source_text),
            temperature=0.7,
            max_tokens=4096,
            response_format={"type": "json_object"},
        )
    except OpenAIError as e:
        logging.error(f"AI generate failed: {str(e)}", exc_info=True)
        raise upstream_failure("AI generation failed")

    content = completion.choices[0].message.content if completion.choices else None
    parsed = _parse_article_json(content)

    title = parsed.get("title") or "Untitled"
    slug_base = slug_or_random(parsed.get("title"))
    logging.info(f"Generating Hedcut image for: {title}")
    image_url = illustrate(
        client,
        image_prompt(title, parsed.get("dek"), parsed.get("excerpt"), parsed.get("body_markdown"), category, topic),
        slug_base,
    )

    article = Article(
        title=title,
        dek=parsed.get("dek") or parsed.get("excerpt") or "",
        excerpt=parsed.get("excerpt") or parsed.get("dek") or "",
        body_markdown=parsed.get("body_markdown") or parsed.get("body") or "",
        category=category,
        status="draft",
        featured=False,
        feature_order=0,
        image_url=image_url,
        ai_generated=True,
        ai_provider=AI_PROVIDER,
        source_url=source_url,
    )
    try:
        assert_durable(article.image_url)
        insert_with_unique_slug(db, article, slug_base)
    except Exception as e:
        db.rollback()
        logging.error(f"AI generate failed: {str(e)}", exc_info=True)
        raise internal_error("AI generation failed")

    logging.info(f"AI draft {article.slug} created by {admin.email}")
    return GenerateResponse(slug=article.slug, status=article.status)


@router.post("/regenerate-image/{slug}", response_model=RegenerateImageResponse, response_model_exclude_none=True)
def regenerate_image(
    slug: str,
    admin: AdminUser = Depends(get_current_admin),
    db: Session = Depends(get_db)
):
    """Replace an article's illustration. Falls back to the placeholder with a warning."""
    client = _client()
    article = get_article(db, slug)
    if article is None:
        raise not_found("Article not found")

    logging.info(f"Regenerating Hedcut image for: {article.title}")
    image_url = illustrate(
        client,
        image_prompt(article.title, article.dek, article.excerpt, article.body_markdown, article.category),
        article.slug,
    )
    assert_durable(image_url)
    article.image_url = image_url
    db.commit()

    if image_url == fallback_image(article.slug):
        return RegenerateImageResponse(image_url=image_url, warning=FALLBACK_WARNING)
    logging.info(f"Image regenerated for {article.slug}: {image_url}")
    return RegenerateImageResponse(image_url=image_url)
