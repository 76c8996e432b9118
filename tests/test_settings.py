"""Tests for environment configuration and startup wiring."""

import pytest

from app.config import Settings
from app.exceptions import NotInitializedError
from app.services import state as state_module
from app.services.state import ServiceState
from conftest import FakeChatModel, FakeEmbeddings, FakeVectorStore


class TestSettings:

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("GEMINI_MODEL_NAME", "gemini-2.0-flash")
        monkeypatch.setenv("QDRANT_COLLECTION", "papers")
        monkeypatch.setenv("QDRANT_NAMESPACE", "lab")
        monkeypatch.setenv("CHUNK_SIZE", "500")

        settings = Settings(_env_file=None)

        assert settings.gemini_model_name == "gemini-2.0-flash"
        assert settings.qdrant_collection == "papers"
        assert settings.qdrant_namespace == "lab"
        assert settings.chunk_size == 500

    def test_empty_values_pass_through(self, monkeypatch):
        monkeypatch.setenv("GOOGLE_API_KEY", "")
        monkeypatch.setenv("QDRANT_NAMESPACE", "")

        settings = Settings(_env_file=None)

        assert settings.google_api_key == ""
        assert settings.qdrant_namespace == ""

    def test_numeric_values_are_parsed(self, monkeypatch):
        monkeypatch.setenv("CHUNK_OVERLAP", "75")
        monkeypatch.setenv("UPSERT_BATCH_SIZE", "16")
        monkeypatch.setenv("LLM_TEMPERATURE", "0.2")

        settings = Settings(_env_file=None)

        assert settings.chunk_overlap == 75
        assert settings.upsert_batch_size == 16
        assert settings.llm_temperature == 0.2

    def test_cors_origin_list(self):
        settings = Settings(_env_file=None, cors_origins="http://a.test, http://b.test,")
        assert settings.cors_origin_list == ["http://a.test", "http://b.test"]

    def test_unknown_dotenv_keys_are_ignored(self, tmp_path, monkeypatch):
        monkeypatch.delenv("QDRANT_NAMESPACE", raising=False)
        env_file = tmp_path / ".env"
        env_file.write_text("QDRANT_NAMESPACE=from-file\nSOME_OTHER_TOOL=1\n")

        settings = Settings(_env_file=str(env_file))

        assert settings.qdrant_namespace == "from-file"


class TestServiceState:

    def test_not_ready_until_initialized(self):
        state = ServiceState()

        assert not state.ready
        with pytest.raises(NotInitializedError):
            state.get_rag_system()
        with pytest.raises(NotInitializedError):
            state.get_file_processor()

    def test_initialize_wires_workflows(self, monkeypatch):
        store = FakeVectorStore()
        store.close = lambda: None
        monkeypatch.setattr(state_module.GeminiChatModel, "from_settings", classmethod(lambda cls, s: FakeChatModel()))
        monkeypatch.setattr(state_module, "build_embedding_provider", lambda s: FakeEmbeddings())
        monkeypatch.setattr(state_module.QdrantVectorStore, "from_settings", classmethod(lambda cls, s: store))

        state = ServiceState()
        settings = Settings(_env_file=None, chunk_size=400, chunk_overlap=40, temp_dir="/var/tmp")

        assert state.initialize(settings) is True
        assert state.ready
        processor = state.get_file_processor()
        assert processor.chunker.chunk_size == 400
        assert processor.chunker.chunk_overlap == 40
        assert processor.temp_dir == "/var/tmp"
        assert state.get_rag_system().index is processor.index
        state.close()

    def test_initialization_failure_leaves_state_unready(self, monkeypatch):
        monkeypatch.setattr(state_module.GeminiChatModel, "from_settings", classmethod(lambda cls, s: FakeChatModel()))

        state = ServiceState()
        settings = Settings(_env_file=None, embedding_provider="carrier-pigeon")

        assert state.initialize(settings) is False
        assert not state.ready
        assert "carrier-pigeon" in state.error
        with pytest.raises(NotInitializedError) as exc_info:
            state.get_rag_system()
        assert exc_info.value.status_code == 503
