from fastapi import Request
from typing import Optional
import logging

from app.config import Settings
from app.exceptions import NotInitializedError
from app.rag.embeddings import build_embedding_provider
from app.rag.file_processor import FileProcessor, TextChunker
from app.rag.llm import GeminiChatModel
from app.rag.providers import ChatModel
from app.rag.rag_system import RAGSystem
from app.rag.vector_db import DocumentIndex, QdrantVectorStore

logger = logging.getLogger(__name__)

class ServiceState:
    """
    AI components shared by all requests.

    Built once at startup. Until ``initialize`` succeeds the state is not
    ready and every accessor raises ``NotInitializedError``.
    """

    def __init__(self):
        self.file_processor: Optional[FileProcessor] = None
        self.rag_system: Optional[RAGSystem] = None
        self.vector_store = None
        self.error: Optional[str] = None

    @property
    def ready(self) -> bool:
        return self.file_processor is not None and self.rag_system is not None

    def initialize(self, settings: Settings) -> bool:
        """Construct the embedding, vector store and chat clients"""
        logger.info("Initializing AI components...")
        try:
            chat_model = GeminiChatModel.from_settings(settings)
            embeddings = build_embedding_provider(settings)
            vector_store = QdrantVectorStore.from_settings(settings)
        except Exception as e:
            self.error = str(e)
            logger.exception(f"❌ Failed to initialize AI components: {e}")
            return False

        self.configure(
            DocumentIndex(embeddings, vector_store),
            chat_model,
            chunker=TextChunker(settings.chunk_size, settings.chunk_overlap),
            temp_dir=settings.temp_dir,
            sample_query=settings.sample_query,
        )
        self.vector_store = vector_store
        logger.info("✅ AI components initialized successfully")
        return True

    def configure(
        self,
        index: DocumentIndex,
        chat_model: ChatModel,
        chunker: Optional[TextChunker] = None,
        temp_dir: str = "/tmp",
        sample_query: str = "What is latent diffusion?",
    ) -> None:
        """Wire the workflows around already constructed clients"""
        self.file_processor = FileProcessor(
            index,
            chunker or TextChunker(),
            temp_dir=temp_dir,
            sample_query=sample_query,
        )
        self.rag_system = RAGSystem(index, chat_model)
        self.error = None

    def get_file_processor(self) -> FileProcessor:
        if not self.ready:
            raise NotInitializedError()
        return self.file_processor

    def get_rag_system(self) -> RAGSystem:
        if not self.ready:
            raise NotInitializedError()
        return self.rag_system

    def close(self) -> None:
        if self.vector_store is not None:
            self.vector_store.close()

def get_service_state(request: Request) -> ServiceState:
    state = getattr(request.app.state, "services", None)
    if state is None:
        raise NotInitializedError()
    return state
