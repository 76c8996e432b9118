import asyncio
import logging
from typing import List

from langchain_core.embeddings import Embeddings
from langchain_google_genai import GoogleGenerativeAIEmbeddings
from langchain_openai import OpenAIEmbeddings

from app.config import Settings

logger = logging.getLogger(__name__)


class LangChainEmbeddingProvider:
    """
    Embedding provider backed by any LangChain ``Embeddings`` model.

    LangChain embedding clients are synchronous, so every call runs in a worker
    thread to keep the event loop free.
    """

    def __init__(self, embeddings: Embeddings, model_name: str = ""):
        self.embeddings = embeddings
        self.model_name = model_name

    async def embed(self, texts: List[str]) -> List[List[float]]:
        if not texts:
            return []
        vectors = await asyncio.to_thread(self.embeddings.embed_documents, texts)
        logger.info(f"Embedded {len(texts)} passages with {self.model_name or 'default model'}")
        return vectors

    async def embed_query(self, text: str) -> List[float]:
        return await asyncio.to_thread(self.embeddings.embed_query, text)


def build_embedding_provider(settings: Settings) -> LangChainEmbeddingProvider:
    """Create the embedding provider selected by ``EMBEDDING_PROVIDER``"""
    provider = settings.embedding_provider.lower()

    if provider == "openai":
        embeddings = OpenAIEmbeddings(
            model=settings.openai_embedding_model,
            api_key=settings.openai_api_key,
        )
        return LangChainEmbeddingProvider(embeddings, settings.openai_embedding_model)

    if provider == "google":
        embeddings = GoogleGenerativeAIEmbeddings(
            model=settings.gemini_embedding_model,
            google_api_key=settings.google_api_key,
        )
        return LangChainEmbeddingProvider(embeddings, settings.gemini_embedding_model)

    raise ValueError(f"Unsupported embedding provider: {settings.embedding_provider}")
