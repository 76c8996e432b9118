from pydantic import BaseModel, Field
from typing import Any, List, Dict, Optional

class SamplePassage(BaseModel):
    page_content: str = Field(..., alias="pageContent")
    metadata: Dict[str, Any] = Field(default_factory=dict)

    class Config:
        populate_by_name = True

class FileUploadResponse(BaseModel):
    filename: str
    pages: int
    chunks: int
    sample_result: List[SamplePassage] = Field(default_factory=list, alias="sampleResult")
    status: str = "ingested"

    class Config:
        populate_by_name = True

class ChatRequest(BaseModel):
    query: Optional[str] = Field(None, description="User's question")
    limit: int = Field(1, ge=1, description="Number of passages to retrieve")

class ChatSource(BaseModel):
    page: Optional[int] = None
    source: Optional[str] = None

class ChatResponse(BaseModel):
    query: str
    answer: str
    sources: List[ChatSource]
    results_found: int = Field(..., alias="resultsFound")

    class Config:
        populate_by_name = True

class ServiceHealth(BaseModel):
    status: str
    initialized: bool
    message: str
    version: str
    error: Optional[str] = None

class ErrorResponse(BaseModel):
    message: str
