from qdrant_client import QdrantClient
from qdrant_client.models import (
    Distance,
    FieldCondition,
    Filter,
    MatchValue,
    PayloadSchemaType,
    PointIdsList,
    PointStruct,
    VectorParams,
)
from langchain_core.documents import Document
from typing import List
import asyncio
import logging
import uuid

from app.config import Settings
from app.rag.providers import EmbeddingProvider, VectorRecord, VectorStore

logger = logging.getLogger(__name__)

NAMESPACE_KEY = "namespace"

class QdrantVectorStore:
    """
    Append-only vector store on a single Qdrant collection.

    Qdrant has no namespaces of its own, so every point carries the namespace
    in its payload and every search is filtered on it. Points are stored as
    ``{"page_content", "metadata", "namespace"}``.
    """

    def __init__(
        self,
        client: QdrantClient,
        collection_name: str,
        namespace: str = "",
        batch_size: int = 100,
    ):
        self.client = client
        self.collection_name = collection_name
        self.namespace = namespace
        self.batch_size = max(1, batch_size)
        self._collection_ready = False
        self._collection_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "QdrantVectorStore":
        if settings.qdrant_api_key:
            client = QdrantClient(url=settings.qdrant_url, api_key=settings.qdrant_api_key)
        else:
            client = QdrantClient(url=settings.qdrant_url)

        return cls(
            client=client,
            collection_name=settings.qdrant_collection,
            namespace=settings.qdrant_namespace,
            batch_size=settings.upsert_batch_size,
        )

    def _namespace_filter(self) -> Filter:
        return Filter(
            must=[
                FieldCondition(
                    key=NAMESPACE_KEY,
                    match=MatchValue(value=self.namespace)
                )
            ]
        )

    async def ensure_collection(self, vector_size: int) -> None:
        """Create the collection on first write if it does not exist yet"""
        if self._collection_ready:
            return

        async with self._collection_lock:
            if self._collection_ready:
                return

            exists = await asyncio.to_thread(
                self.client.collection_exists, collection_name=self.collection_name
            )
            if not exists:
                await asyncio.to_thread(
                    self.client.create_collection,
                    collection_name=self.collection_name,
                    vectors_config=VectorParams(size=vector_size, distance=Distance.COSINE),
                )
                await asyncio.to_thread(
                    self.client.create_payload_index,
                    collection_name=self.collection_name,
                    field_name=NAMESPACE_KEY,
                    field_schema=PayloadSchemaType.KEYWORD,
                )
                logger.info(f"✅ Created collection: {self.collection_name}")

            self._collection_ready = True

    async def upsert(self, records: List[VectorRecord]) -> List[str]:
        """
        Write all records or none of them.

        Records go out in sequential batches. If a batch fails, points from the
        batches already written are deleted again and the original error is
        re-raised.
        """
        if not records:
            return []

        await self.ensure_collection(len(records[0].vector))

        points = [
            PointStruct(
                id=str(uuid.uuid4()),
                vector=record.vector,
                payload={
                    "page_content": record.text,
                    "metadata": record.metadata,
                    NAMESPACE_KEY: self.namespace,
                },
            )
            for record in records
        ]

        written: List[str] = []
        try:
            for start in range(0, len(points), self.batch_size):
                batch = points[start:start + self.batch_size]
                await asyncio.to_thread(
                    self.client.upsert,
                    collection_name=self.collection_name,
                    points=batch,
                    wait=True,
                )
                written.extend(str(point.id) for point in batch)
        except Exception:
            logger.error(
                f"❌ Upsert failed after {len(written)}/{len(points)} points, rolling back"
            )
            await self.delete(written)
            raise

        logger.info(
            f"✅ Stored {len(written)} points in '{self.collection_name}' "
            f"(namespace '{self.namespace}')"
        )
        return written

    async def delete(self, ids: List[str]) -> None:
        """Best-effort removal of points, used to undo a partial upsert"""
        if not ids:
            return
        try:
            await asyncio.to_thread(
                self.client.delete,
                collection_name=self.collection_name,
                points_selector=PointIdsList(points=ids),
                wait=True,
            )
            logger.info(f"Deleted {len(ids)} points from '{self.collection_name}'")
        except Exception as e:
            logger.error(f"❌ Could not delete {len(ids)} points from '{self.collection_name}': {e}")

    async def search(self, vector: List[float], limit: int) -> List[Document]:
        # nothing has been written yet: an empty index, not an error
        if not self._collection_ready:
            exists = await asyncio.to_thread(
                self.client.collection_exists, collection_name=self.collection_name
            )
            if not exists:
                logger.info(f"Collection '{self.collection_name}' does not exist yet, no passages")
                return []

        response = await asyncio.to_thread(
            self.client.query_points,
            collection_name=self.collection_name,
            query=vector,
            query_filter=self._namespace_filter(),
            limit=limit,
            with_payload=True,
        )

        results = []
        for point in response.points:
            payload = point.payload or {}
            results.append(Document(
                page_content=payload.get("page_content", ""),
                metadata=payload.get("metadata", {}),
            ))

        logger.info(f"✅ Found {len(results)} similar passages")
        return results

    def close(self) -> None:
        self.client.close()


class DocumentIndex:
    """
    Embeds and stores LangChain documents, and finds the ones closest to a query.

    Pairs an embedding provider with a vector store so callers deal only in
    documents and query strings.
    """

    def __init__(self, embeddings: EmbeddingProvider, vector_store: VectorStore):
        self.embeddings = embeddings
        self.vector_store = vector_store

    async def add_documents(self, documents: List[Document]) -> List[str]:
        # every vector is computed before the first write
        vectors = await self.embeddings.embed([doc.page_content for doc in documents])
        records = [
            VectorRecord(vector=vector, text=doc.page_content, metadata=dict(doc.metadata))
            for doc, vector in zip(documents, vectors)
        ]
        return await self.vector_store.upsert(records)

    async def similarity_search(self, query: str, k: int = 1) -> List[Document]:
        vector = await self.embeddings.embed_query(query)
        return await self.vector_store.search(vector, k)
