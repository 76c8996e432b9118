import os
import time
import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, List, Optional
from fastapi import UploadFile
import PyPDF2
from langchain_core.documents import Document
from langchain_text_splitters import RecursiveCharacterTextSplitter
from app.exceptions import InputError, ProcessingError
from .models import FileUploadResponse, SamplePassage
from .vector_db import DocumentIndex

logger = logging.getLogger(__name__)

PDF_MIME_TYPE = "application/pdf"

def is_pdf(filename: Optional[str], content_type: Optional[str]) -> bool:
    """Accept a declared PDF MIME type or a ``.pdf`` filename"""
    if content_type == PDF_MIME_TYPE:
        return True
    return bool(filename) and filename.lower().endswith(".pdf")

def _write_file(path: str, content: bytes) -> None:
    with open(path, "wb") as f:
        f.write(content)

@asynccontextmanager
async def temporary_upload(content: bytes, filename: str, temp_dir: str) -> AsyncIterator[str]:
    """
    Write an upload to a uniquely named temp file and yield its path.

    The file is removed when the block exits, successfully or not. Removal is
    attempted exactly once and a failure to remove is only logged.
    """
    safe_name = os.path.basename(filename or "upload.pdf")
    path = os.path.join(temp_dir, f"temp_{int(time.time() * 1000)}_{safe_name}")
    try:
        await asyncio.to_thread(_write_file, path, content)
        yield path
    finally:
        try:
            await asyncio.to_thread(os.remove, path)
            logger.info("Temporary file cleaned up")
        except OSError as e:
            logger.error(f"❌ Error cleaning up temporary file {path}: {e}")

def load_pdf(path: str, source: str) -> List[Document]:
    """Extract one document per PDF page, numbered from 1"""
    reader = PyPDF2.PdfReader(path)
    documents = []

    for page_number, page in enumerate(reader.pages, 1):
        documents.append(Document(
            page_content=page.extract_text() or "",
            metadata={"source": source, "pageNumber": page_number}
        ))

    return documents

class TextChunker:
    """
    Splits page documents into overlapping chunks that keep only
    ``source`` and ``pageNumber`` metadata.
    """

    def __init__(self, chunk_size: int = 1000, chunk_overlap: int = 150):
        self.chunk_size = chunk_size
        self.chunk_overlap = chunk_overlap
        self.text_splitter = RecursiveCharacterTextSplitter(
            chunk_size=self.chunk_size,
            chunk_overlap=self.chunk_overlap,
            length_function=len,
        )

    def split(self, documents: List[Document]) -> List[Document]:
        chunks = self.text_splitter.split_documents(documents)
        return [
            Document(
                page_content=chunk.page_content,
                metadata={
                    "source": chunk.metadata.get("source"),
                    "pageNumber": chunk.metadata.get("pageNumber"),
                }
            )
            for chunk in chunks
        ]

class FileProcessor:
    """
    Ingests uploaded PDFs: validate, write to a temp file, load pages,
    chunk, embed and store, then run one diagnostic search.
    """

    def __init__(
        self,
        index: DocumentIndex,
        chunker: TextChunker,
        temp_dir: str = "/tmp",
        sample_query: str = "What is latent diffusion?",
    ):
        self.index = index
        self.chunker = chunker
        self.temp_dir = temp_dir
        self.sample_query = sample_query

    def validate_file(self, file: Optional[UploadFile]) -> None:
        if file is None:
            raise InputError("No PDF file provided")

        if not is_pdf(file.filename, file.content_type):
            raise InputError("File must be a PDF")

    async def process_and_store(self, file: Optional[UploadFile]) -> FileUploadResponse:
        """Index an uploaded PDF and report what was stored"""
        self.validate_file(file)
        filename = file.filename or ""

        try:
            content = await file.read()

            async with temporary_upload(content, filename, self.temp_dir) as path:
                docs = await asyncio.to_thread(load_pdf, path, filename)
                chunks = self.chunker.split(docs)

                if chunks:
                    logger.info(f"Example chunk from {filename}: {chunks[0].metadata}, total {len(chunks)}")

                await self.index.add_documents(chunks)

                sample = await self.index.similarity_search(self.sample_query, 1)

        except Exception as e:
            logger.error(f"❌ Error processing PDF {filename}: {e}")
            raise ProcessingError(str(e)) from e

        logger.info(f"✅ Ingested {filename}: {len(docs)} pages, {len(chunks)} chunks")

        return FileUploadResponse(
            filename=filename,
            pages=len(docs),
            chunks=len(chunks),
            sample_result=[_sample_passage(doc) for doc in sample],
            status="ingested",
        )

def _sample_passage(doc: Document) -> SamplePassage:
    metadata: Dict = dict(doc.metadata)
    return SamplePassage(page_content=doc.page_content, metadata=metadata)
