"""
Context rendering for prompt assembly.

The rendered block is consumed verbatim by the prompt assembler, so its
header and entry format must not change.
"""

from vector_store.models import SearchResult

CONTEXT_HEADER = "\n\nRelevant context from your knowledge base:\n"


def render_context(results: list[SearchResult]) -> str:
    """
    Render ranked results as a numbered context block.

    Returns an empty string when there are no results.
    """
    if not results:
        return ""
    parts = [CONTEXT_HEADER]
    for i, result in enumerate(results, start=1):
        parts.append(f"\n[{i}] {result.document.content}\n")
    return "".join(parts)
