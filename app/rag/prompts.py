"""
Prompt composition for grounded answers.

The answer style is inferred from keywords in the query, then embedded in a
system prompt together with the grounding rules. Retrieved passages and the
question go into the user turn.
"""

from typing import List, NamedTuple

from langchain_core.documents import Document


class ResponseStyle(NamedTuple):
    format: str
    length: str


BULLET_KEYWORDS = ("point", "list", "steps")
BRIEF_KEYWORDS = ("short",)
DETAILED_KEYWORDS = ("detailed", "explain")

PASSAGE_SEPARATOR = "\n\n---\n\n"


def infer_response_style(query: str) -> ResponseStyle:
    """Pick answer format and length from keywords in the query"""
    q = query.lower()

    if any(word in q for word in BULLET_KEYWORDS):
        response_format = "bullet points"
    else:
        response_format = "paragraphs"

    # "short" wins over "detailed" / "explain"
    if any(word in q for word in BRIEF_KEYWORDS):
        length = "brief"
    elif any(word in q for word in DETAILED_KEYWORDS):
        length = "detailed"
    else:
        length = "concise"

    return ResponseStyle(format=response_format, length=length)


def build_system_prompt(query: str) -> str:
    style = infer_response_style(query)

    return f"""
You are a research assistant.

User intent:
- The user asked: "{query}"
- Respond using {style.format}.
- The response should be {style.length}.

Rules:
- Use the provided context as factual grounding.
- You may rephrase, summarize, and synthesize.
- Do NOT invent citations, equations, or claims not supported by context.
- If context is insufficient, say so clearly.

Tone:
- Clear
- Academic
- Neutral
"""


def build_context(passages: List[Document]) -> str:
    """Label each passage as ``Source N (page P)`` and join them"""
    parts = []
    for i, doc in enumerate(passages, 1):
        page = doc.metadata.get("pageNumber")
        parts.append(f"Source {i} (page {page}):\n{doc.page_content}")
    return PASSAGE_SEPARATOR.join(parts)


def build_user_message(query: str, passages: List[Document]) -> str:
    context = build_context(passages)
    return f"""Context: {context}

User Question: {query}

Answer:"""
