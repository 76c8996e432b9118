from fastapi import APIRouter, Depends, File, UploadFile
from typing import Optional
import logging

from app.rag.models import FileUploadResponse, ErrorResponse
from app.services.state import ServiceState, get_service_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Documents"])

@router.post(
    "/upload-pdf",
    response_model=FileUploadResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def upload_pdf(
    file: Optional[UploadFile] = File(None, description="PDF document to index"),
    state: ServiceState = Depends(get_service_state),
):
    """
    Index a PDF into the vector store
    """
    file_processor = state.get_file_processor()
    result = await file_processor.process_and_store(file)

    logger.info(f"✅ Document uploaded: {result.filename}")
    return result
