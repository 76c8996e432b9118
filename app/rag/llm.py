from langchain_core.language_models.chat_models import BaseChatModel
from langchain_core.messages import HumanMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI
import logging

from app.config import Settings

logger = logging.getLogger(__name__)

class GeminiChatModel:
    """
    Chat model sending one system + user prompt to Gemini.

    No conversation history is attached and the answer is returned in one piece.
    """

    def __init__(self, llm: BaseChatModel):
        self.llm = llm

    @classmethod
    def from_settings(cls, settings: Settings) -> "GeminiChatModel":
        llm = ChatGoogleGenerativeAI(
            model=settings.gemini_model_name,
            temperature=settings.llm_temperature,
            google_api_key=settings.google_api_key
        )
        return cls(llm)

    async def complete(self, system_prompt: str, user_message: str) -> str:
        messages = [
            SystemMessage(content=system_prompt),
            HumanMessage(content=user_message),
        ]
        response = await self.llm.ainvoke(messages)
        return _message_text(response.content)


def _message_text(content) -> str:
    # Gemini may answer with a list of content blocks instead of a plain string
    if isinstance(content, str):
        return content
    parts = []
    for block in content:
        if isinstance(block, str):
            parts.append(block)
        elif isinstance(block, dict) and block.get("type") == "text":
            parts.append(block.get("text", ""))
    return "".join(parts)
