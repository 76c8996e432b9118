"""Shared pytest fixtures for the research assistant tests."""
import io
import os
import pytest
from typing import List

from langchain_core.documents import Document
from qdrant_client import QdrantClient
from starlette.datastructures import Headers, UploadFile

from app.rag.file_processor import FileProcessor, TextChunker
from app.rag.providers import VectorRecord
from app.rag.vector_db import DocumentIndex, QdrantVectorStore
from app.services.state import ServiceState


# =============================================================================
# Test doubles for the external capabilities
# =============================================================================

VOCABULARY = [
    "transformer", "attention", "token",
    "latent", "diffusion", "denoising",
    "reinforcement", "reward", "policy",
]


class FakeEmbeddings:
    """Keyword-count embeddings: texts sharing topic words end up close."""

    def __init__(self, fail_on_documents=False, fail_on_query=False):
        self.fail_on_documents = fail_on_documents
        self.fail_on_query = fail_on_query
        self.document_calls: List[List[str]] = []
        self.query_calls: List[str] = []

    @staticmethod
    def vectorize(text: str) -> List[float]:
        lowered = text.lower()
        return [float(lowered.count(word)) for word in VOCABULARY] + [0.1]

    async def embed(self, texts):
        self.document_calls.append(list(texts))
        if self.fail_on_documents:
            raise RuntimeError("embedding service unavailable")
        return [self.vectorize(text) for text in texts]

    async def embed_query(self, text):
        self.query_calls.append(text)
        if self.fail_on_query:
            raise RuntimeError("query embedding failed")
        return self.vectorize(text)

    @property
    def calls(self) -> int:
        return len(self.document_calls) + len(self.query_calls)


class FakeVectorStore:
    """In-memory store returning canned passages from search."""

    def __init__(self, passages=None, fail_on_upsert=False):
        self.passages = passages or []
        self.fail_on_upsert = fail_on_upsert
        self.records: List[VectorRecord] = []
        self.search_calls = []

    async def upsert(self, records):
        if self.fail_on_upsert:
            raise RuntimeError("upsert rejected")
        self.records.extend(records)
        return [str(i) for i in range(len(records))]

    async def search(self, vector, limit):
        self.search_calls.append((vector, limit))
        return self.passages[:limit]


class FakeChatModel:
    def __init__(self, answer="A grounded answer.", error=None):
        self.answer = answer
        self.error = error
        self.prompts = []

    async def complete(self, system_prompt, user_message):
        self.prompts.append((system_prompt, user_message))
        if self.error is not None:
            raise self.error
        return self.answer


# =============================================================================
# PDFs and uploads
# =============================================================================

PAGE_TEXTS = [
    "The transformer relies on attention over every token in the sequence.",
    "Latent diffusion runs the denoising process in a compressed latent space.",
    "Reinforcement learning optimizes a policy to maximise expected reward.",
]


def build_pdf(pages: List[str]) -> bytes:
    """Render one line of text per page with reportlab."""
    from reportlab.lib.pagesizes import letter
    from reportlab.pdfgen import canvas

    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    for text in pages:
        pdf.drawString(72, 720, text)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


def make_upload(content: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(content),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.fixture
def pdf_bytes() -> bytes:
    return build_pdf(PAGE_TEXTS)


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def remove_spy(monkeypatch):
    """Record every temp file removal attempt made by the ingestion code."""
    from app.rag import file_processor

    calls = []
    real_remove = os.remove

    def spy(path, *args, **kwargs):
        calls.append(path)
        return real_remove(path, *args, **kwargs)

    monkeypatch.setattr(file_processor.os, "remove", spy)
    return calls


# =============================================================================
# Wired components
# =============================================================================

@pytest.fixture
def embeddings():
    return FakeEmbeddings()


@pytest.fixture
def chat_model():
    return FakeChatModel()


@pytest.fixture
def qdrant_store():
    client = QdrantClient(":memory:")
    store = QdrantVectorStore(client, "test-papers", namespace="tests", batch_size=2)
    yield store
    client.close()


@pytest.fixture
def file_processor_factory(upload_dir):
    def factory(embeddings, vector_store, chunker=None):
        index = DocumentIndex(embeddings, vector_store)
        return FileProcessor(index, chunker or TextChunker(), temp_dir=str(upload_dir))
    return factory


@pytest.fixture
def service_state(embeddings, qdrant_store, chat_model, upload_dir):
    state = ServiceState()
    state.configure(
        DocumentIndex(embeddings, qdrant_store),
        chat_model,
        temp_dir=str(upload_dir),
    )
    return state


@pytest.fixture
def client(service_state):
    from fastapi.testclient import TestClient

    from app.main import app
    from app.services.state import get_service_state

    app.dependency_overrides[get_service_state] = lambda: service_state
    # lifespan is not entered: no real clients are built
    test_client = TestClient(app, raise_server_exceptions=False)
    yield test_client
    app.dependency_overrides.clear()


def passage(text: str, page=None, source=None) -> Document:
    metadata = {}
    if page is not None:
        metadata["pageNumber"] = page
    if source is not None:
        metadata["source"] = source
    return Document(page_content=text, metadata=metadata)
