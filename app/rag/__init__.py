"""
RAG (Retrieval Augmented Generation) System

This module provides the research assistant RAG implementation with:
- PDF loading and chunking
- Vector storage with Qdrant
- Similarity search and retrieval
- Grounded answers from Google Gemini
"""

from app.rag.file_processor import FileProcessor, TextChunker
from app.rag.rag_system import RAGSystem
from app.rag.vector_db import DocumentIndex, QdrantVectorStore

__all__ = [
    "FileProcessor",
    "TextChunker",
    "RAGSystem",
    "DocumentIndex",
    "QdrantVectorStore",
]
