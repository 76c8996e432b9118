from langchain_core.documents import Document
from typing import List, Optional
import logging
from app.exceptions import InputError
from .models import ChatResponse, ChatSource
from .prompts import build_system_prompt, build_user_message
from .providers import ChatModel
from .vector_db import DocumentIndex

logger = logging.getLogger(__name__)

class RAGSystem:
    """
    Answers questions from indexed documents: retrieve, compose a grounded
    prompt, ask the chat model once.

    Retrieval and generation errors are not caught here; they propagate to
    the API layer as server errors.
    """

    def __init__(self, index: DocumentIndex, chat_model: ChatModel):
        self.index = index
        self.chat_model = chat_model

    async def perform_similarity_search(self, query: str, limit: int) -> List[Document]:
        return await self.index.similarity_search(query, limit)

    async def generate_answer(self, query: str, passages: List[Document]) -> str:
        system_prompt = build_system_prompt(query)
        user_message = build_user_message(query, passages)
        return await self.chat_model.complete(system_prompt, user_message)

    async def generate_response(self, query: Optional[str], limit: int = 1) -> ChatResponse:
        if not query or not query.strip():
            raise InputError("Query is required")

        passages = await self.perform_similarity_search(query, limit)
        answer = await self.generate_answer(query, passages)

        logger.info(f"✅ Generated answer from {len(passages)} passages")

        return ChatResponse(
            query=query,
            answer=answer,
            sources=[
                ChatSource(
                    page=doc.metadata.get("pageNumber"),
                    source=doc.metadata.get("source"),
                )
                for doc in passages
            ],
            results_found=len(passages),
        )
