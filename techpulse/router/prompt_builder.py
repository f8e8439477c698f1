# router/prompt_builder.py
from typing import Optional


_BRIEFING_PROMPT = """\
    Role: Editor-in-Chief for "TechPulse Daily" (每日科技脉搏).
    Task: Curate the most significant global technology news strictly for **{today}** (and late {yesterday}).
    Language: {language}.

    CRITICAL DATE CONSTRAINT:
    - You must ONLY include news that happened or was reported on **{yesterday}** or **{today}**.
    - **ABSOLUTELY NO NEWS OLDER THAN 48 HOURS.**
    - If a story is from last week, DISCARD IT immediately.
    - Check the publication date carefully.

    Priority Order:
    {priorities}

    Instructions:
    1. Find **Breaking News** and **Real-time Updates**.
    2. Select **{min_stories} to {max_stories} distinct stories** covering the categories above.
    3. Sort strictly by priority (AI news first).
    4. Provide detailed summary (3-5 sentences) with key facts, context, and impact.

    CRITICAL: Return ONLY valid JSON array (no markdown, no code blocks):
    [
      {{
        "headline": "Headline in {language}",
        "summary": "Detailed summary in {language}",
        "category": "Category name (e.g. 人工智能, 芯片技术)"
      }}
    ]
    """

# Orden editorial: la IA siempre primero
BRIEFING_PRIORITIES = (
    ("Artificial Intelligence (AI)", "LLMs, Agents, AGI breakthroughs, OpenAI, Gemini, Claude"),
    ("Tech Giants",                  "Apple, Microsoft, Google, Meta, Tesla major moves"),
    ("Semiconductors & Chips",       "Nvidia, TSMC, Quantum Computing"),
    ("Frontier Tech",                "Brain-Computer Interfaces, Robotics, Bio-tech"),
    ("Energy & Aerospace",           "New Energy, SpaceX, Space Exploration"),
    ("Fundamental Science",          "Physics, Material Science, Mathematics"),
)

_LANGUAGE_DEFAULT = "Simplified Chinese (简体中文)"


def build_briefing_prompt(
    today:       str,
    yesterday:   str,
    language:    Optional[str] = None,
    min_stories: int           = 6,
    max_stories: int           = 8,
) -> str:
    """
    Construye el prompt del briefing diario.

    Las fechas llegan ya formateadas (YYYY-MM-DD): el prompt no calcula
    nada, así es reproducible en tests.
    """
    if min_stories > max_stories:
        raise ValueError("min_stories no puede superar max_stories")

    return _BRIEFING_PROMPT.format(
        today       = today,
        yesterday   = yesterday,
        language    = language or _LANGUAGE_DEFAULT,
        priorities  = _format_priorities(BRIEFING_PRIORITIES),
        min_stories = min_stories,
        max_stories = max_stories,
    )


def _format_priorities(priorities) -> str:
    return "\n    ".join(
        f"{i}. **{title}**: {examples}"
        for i, (title, examples) in enumerate(priorities, start=1)
    )
