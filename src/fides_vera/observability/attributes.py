"""
Semantic Conventions for Span Attributes

Attribute keys following OpenTelemetry GenAI conventions plus custom
namespaces for retrieval and conversation retention.

Reference: https://opentelemetry.io/docs/specs/semconv/gen-ai/
"""

# ---------------------------------------------------------------------------
# GENAI NAMESPACE (OTel standard)
# ---------------------------------------------------------------------------

GEN_AI_SYSTEM = "gen_ai.system"
GEN_AI_REQUEST_MODEL = "gen_ai.request.model"
GEN_AI_REQUEST_TEMPERATURE = "gen_ai.request.temperature"
GEN_AI_REQUEST_MAX_TOKENS = "gen_ai.request.max_tokens"

# Request/Response (optional, controlled by TRACING_CAPTURE_CONTENT)
GEN_AI_PROMPT = "gen_ai.prompt"
GEN_AI_COMPLETION = "gen_ai.completion"


# ---------------------------------------------------------------------------
# RAG NAMESPACE (custom)
# ---------------------------------------------------------------------------

RAG_CHAT_ID = "rag.chat_id"
RAG_RETRIEVED_DOC_COUNT = "rag.retrieved_doc_count"
RAG_RETRIEVED_DOC_IDS = "rag.retrieved_doc_ids"
RAG_HISTORY_LENGTH = "rag.history_length"
RAG_PROMPT_MESSAGE_COUNT = "rag.prompt_message_count"


# ---------------------------------------------------------------------------
# CONVERSATIONS NAMESPACE (custom)
# ---------------------------------------------------------------------------

CONVERSATIONS_MESSAGES_REMOVED = "conversations.messages_removed"
CONVERSATIONS_CHATS_EVICTED = "conversations.chats_evicted"


# ---------------------------------------------------------------------------
# HELPER FUNCTIONS
# ---------------------------------------------------------------------------


def completion_attributes(model: str | None, temperature: float, max_tokens: int) -> dict:
    """Create attributes dict for a completion span."""
    attrs = {
        GEN_AI_REQUEST_TEMPERATURE: temperature,
        GEN_AI_REQUEST_MAX_TOKENS: max_tokens,
    }
    if model:
        attrs[GEN_AI_REQUEST_MODEL] = model
    return attrs


def retrieval_attributes(doc_ids: list[int]) -> dict:
    """Create attributes dict for a retrieval span."""
    return {
        RAG_RETRIEVED_DOC_COUNT: len(doc_ids),
        RAG_RETRIEVED_DOC_IDS: [str(doc_id) for doc_id in doc_ids],
    }
