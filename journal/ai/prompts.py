"""Prompt builders for article text and Hedcut-style illustrations."""

from typing import List, Dict, Optional

SYSTEM_PROMPT = "You are an editor for a newspaper-style UX publication. Output JSON only."
FORMAT_PROMPT = "Return JSON with keys: title, dek, excerpt, body_markdown. Body should include h2s, bullets if useful."

MAX_SOURCE_CHARS = 6000

CATEGORY_VISUAL_HINTS = {
    "practice": "tools, wireframes, sketches, sticky notes, prototypes, design artifacts, user flows",
    "design-reviews": "screens, interfaces, magnifying glass, design critique, comparison layouts",
    "career": "desk workspace, ladder, handshake, briefcase, growth chart, mentorship scene",
    "signals": "radar, compass, telescope, trend arrows, emerging technology, data patterns",
    "journal": "notebook, pen, coffee cup, window view, thoughtful workspace, open sketchbook",
}
DEFAULT_VISUAL_HINTS = "design tools, digital interfaces, creative workspace"

HEDCUT_STYLE = (
    "STYLE (Hedcut stipple engraving):\n"
    "Black and white only. Rendered entirely with tiny hand-drawn ink dots (stippling) and fine "
    "crosshatch lines on a pure white background, in the style of classic Wall Street Journal Hedcut "
    "illustrations. High contrast. No solid fills, no gradients, no gray tones, only varying dot "
    "density. Must look hand-engraved for a newspaper editorial page."
)


def article_messages(category: str, topic: str, mode: str, source_text: str) -> List[Dict[str, str]]:
    lines = [f'Write an article for category "{category}" in a calm, authoritative tone.']
    if topic:
        lines.append(f'Focus the article on the topic: "{topic}".')
    lines.append(f"Mode: {mode}")
    lines.append(f"Source:\n{source_text[:MAX_SOURCE_CHARS]}")
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": "\n".join(lines)},
        {"role": "user", "content": FORMAT_PROMPT},
    ]


def image_prompt(
    title: str,
    dek: Optional[str],
    excerpt: Optional[str],
    body_markdown: Optional[str],
    category: str,
    topic: Optional[str] = None,
) -> str:
    """
    Illustration prompt: the article subject first, the Hedcut style second.

    The category picks a set of concrete objects so the model draws a scene
    or metaphor rather than a generic portrait.
    """
    hints = CATEGORY_VISUAL_HINTS.get(category, DEFAULT_VISUAL_HINTS)
    summary = (dek or excerpt or "")[:300]
    topic_context = f"Topic focus: {topic}. " if topic else ""
    body_snippet = (body_markdown or "")[:500]

    return (
        "Editorial illustration for a UX design newspaper article.\n\n"
        "SUBJECT (most important, the image must clearly relate to this):\n"
        f'Article: "{title}"\n'
        f'{topic_context}Summary: "{summary}"\n'
        f'Opening: "{body_snippet}"\n'
        "The illustration must depict a specific scene, object, or visual metaphor that directly "
        f"represents the article's subject matter. Consider objects like: {hints}. Do NOT default to "
        "a generic face or person; show the concepts, tools, environments, or metaphors central to "
        "the article's topic.\n\n"
        f"{HEDCUT_STYLE}"
    )
