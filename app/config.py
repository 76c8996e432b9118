from pydantic_settings import BaseSettings
import os
from dotenv import load_dotenv

load_dotenv()

class Settings(BaseSettings):
    # LLM Configuration
    google_api_key: str = os.getenv("GOOGLE_API_KEY", "")
    gemini_model_name: str = os.getenv("GEMINI_MODEL_NAME", "")
    llm_temperature: float = float(os.getenv("LLM_TEMPERATURE", 0.6))

    # Embedding Configuration
    embedding_provider: str = os.getenv("EMBEDDING_PROVIDER", "google")  # google | openai
    gemini_embedding_model: str = os.getenv("GEMINI_EMBEDDING_MODEL", "")
    openai_api_key: str = os.getenv("OPENAI_API_KEY", "")
    openai_embedding_model: str = os.getenv("OPENAI_EMBEDDING_MODEL", "text-embedding-3-small")

    # Qdrant Configuration
    qdrant_url: str = os.getenv("QDRANT_URL", "http://localhost:6333")
    qdrant_api_key: str = os.getenv("QDRANT_API_KEY", "")
    qdrant_collection: str = os.getenv("QDRANT_COLLECTION", "")
    qdrant_namespace: str = os.getenv("QDRANT_NAMESPACE", "")
    upsert_batch_size: int = int(os.getenv("UPSERT_BATCH_SIZE", 100))

    # RAG Settings
    chunk_size: int = int(os.getenv("CHUNK_SIZE", 1000))
    chunk_overlap: int = int(os.getenv("CHUNK_OVERLAP", 150))
    sample_query: str = os.getenv("SAMPLE_QUERY", "What is latent diffusion?")

    # File Upload Settings
    temp_dir: str = os.getenv("TEMP_DIR", "/tmp")

    # App Configuration
    host: str = os.getenv("HOST", "0.0.0.0")
    port: int = int(os.getenv("PORT", 8000))
    debug: bool = os.getenv("DEBUG", "False").lower() == "true"
    cors_origins: str = os.getenv("CORS_ORIGINS", "*")  # comma separated

    class Config:
        env_file = ".env"
        extra = "ignore"

    @property
    def cors_origin_list(self) -> list:
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

settings = Settings()
