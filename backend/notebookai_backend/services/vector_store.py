from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from typing import Sequence

import chromadb
from chromadb import Collection

from ..config import AppConfig
from ..errors import StoreError
from ..models.notebook import Chunk, ChunkMatch, Source
from .record_store import utcnow

logger = logging.getLogger(__name__)


@dataclass
class VectorStoreManager:
    """
    Chunk storage with similarity search, one chromadb collection per notebook.
    """

    client: chromadb.ClientAPI

    def _collection_name(self, notebook_id: str) -> str:
        return f"notebook_{notebook_id}"

    def get_collection(self, notebook_id: str) -> Collection:
        return self.client.get_or_create_collection(
            name=self._collection_name(notebook_id),
            metadata={"hnsw:space": "cosine"},
            embedding_function=None,
        )

    def add_chunks(
        self,
        notebook_id: str,
        source: Source,
        contents: Sequence[str],
        embeddings: Sequence[Sequence[float]],
    ) -> list[Chunk]:
        """Persist all chunks of one source in a single batch."""
        if len(contents) != len(embeddings):
            raise ValueError("Each chunk needs exactly one embedding")
        if not contents:
            return []

        created_at = utcnow()
        chunks = [
            Chunk(
                id=uuid.uuid4().hex,
                source_id=source.id,
                content=content,
                embedding=list(embedding),
                created_at=created_at,
            )
            for content, embedding in zip(contents, embeddings)
        ]
        try:
            self.get_collection(notebook_id).add(
                ids=[chunk.id for chunk in chunks],
                documents=[chunk.content for chunk in chunks],
                embeddings=[chunk.embedding for chunk in chunks],
                metadatas=[
                    {"source_id": source.id, "file_name": source.file_name, "created_at": created_at}
                    for _ in chunks
                ],
            )
        except Exception as e:
            raise StoreError(f"Failed to store chunks for {source.file_name}: {e}") from e
        return chunks

    def list_chunks(self, notebook_id: str, source_id: str | None = None) -> list[Chunk]:
        where = {"source_id": source_id} if source_id else None
        results = self.get_collection(notebook_id).get(
            where=where,
            include=["documents", "metadatas", "embeddings"],
        )
        embeddings = results.get("embeddings")
        if embeddings is None:
            embeddings = [[] for _ in results["ids"]]
        return [
            Chunk(
                id=chunk_id,
                source_id=metadata["source_id"],
                content=document,
                embedding=[float(value) for value in embedding],
                created_at=metadata["created_at"],
            )
            for chunk_id, document, metadata, embedding in zip(
                results["ids"], results["documents"], results["metadatas"], embeddings
            )
        ]

    def count_chunks(self, notebook_id: str, source_id: str | None = None) -> int:
        collection = self.get_collection(notebook_id)
        if source_id is None:
            return collection.count()
        return len(collection.get(where={"source_id": source_id}, include=[])["ids"])

    def match_chunks(
        self,
        query_embedding: Sequence[float],
        threshold: float,
        count: int,
        notebook_id: str,
    ) -> list[ChunkMatch]:
        """
        Rank stored chunks of a notebook by cosine similarity to ``query_embedding``.

        Ranking is done by the chromadb index; matches below ``threshold`` are dropped.
        """
        collection = self.get_collection(notebook_id)
        available = collection.count()
        if available == 0:
            return []
        try:
            results = collection.query(
                query_embeddings=[list(query_embedding)],
                n_results=min(count, available),
                include=["documents", "metadatas", "distances"],
            )
        except Exception as e:
            raise StoreError(f"Similarity search failed: {e}") from e

        matches: list[ChunkMatch] = []
        for chunk_id, document, metadata, distance in zip(
            results["ids"][0],
            results["documents"][0],
            results["metadatas"][0],
            results["distances"][0],
        ):
            similarity = 1.0 - float(distance)
            if similarity < threshold:
                continue
            matches.append(
                ChunkMatch(
                    id=chunk_id,
                    content=document,
                    similarity=similarity,
                    file_name=metadata.get("file_name", "unknown"),
                )
            )
        return matches

    def delete_notebook(self, notebook_id: str) -> None:
        self.get_collection(notebook_id)
        self.client.delete_collection(name=self._collection_name(notebook_id))
        logger.info(f"Dropped chunk collection for notebook {notebook_id}")


def create_vector_store(settings: AppConfig) -> VectorStoreManager:
    client = chromadb.PersistentClient(path=str(settings.index_dir))
    return VectorStoreManager(client=client)
