"""
Data Models for the Chunking Pipeline

Defines:
1. IndexedFile - A file collected for ingestion, with its text content
2. FileChunk - One window of a file, tagged with its position
"""

from pydantic import BaseModel, Field


class IndexedFile(BaseModel):
    """A file to be indexed with its content."""
    path: str = Field(
        ...,
        description="Path of the file as found during the walk",
    )
    content: str = Field(
        ...,
        description="Full UTF-8 text of the file",
    )


class FileChunk(BaseModel):
    """A single chunk of an indexed file."""
    source: str = Field(
        ...,
        description="Path of the file the chunk was cut from",
    )
    chunk_index: int = Field(
        ...,
        ge=0,
        description="Zero-based position of the chunk within its file",
    )
    text: str = Field(
        ...,
        description="Chunk text",
    )

    @property
    def chunk_id(self) -> str:
        return f"{self.source}_chunk_{self.chunk_index}"
