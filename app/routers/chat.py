from fastapi import APIRouter, Depends
import logging

from app.rag.models import ChatRequest, ChatResponse, ErrorResponse
from app.services.state import ServiceState, get_service_state

logger = logging.getLogger(__name__)

router = APIRouter(tags=["RAG Chat"])

@router.post(
    "/chat",
    response_model=ChatResponse,
    responses={400: {"model": ErrorResponse}, 503: {"model": ErrorResponse}},
)
async def chat_with_documents(
    chat_request: ChatRequest,
    state: ServiceState = Depends(get_service_state),
):
    """
    Answer a question from the indexed documents
    """
    rag_system = state.get_rag_system()
    response = await rag_system.generate_response(chat_request.query, chat_request.limit)

    logger.info(f"✅ Chat response generated with {response.results_found} sources")
    return response
