"""Application configuration management."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Résumé RAG settings loaded from environment variables."""

    # Credentials
    google_api_key: str = ""
    anthropic_api_key: str = ""

    # Embedding
    resume_rag_embedding_provider: str = "google"
    resume_rag_embedding_model: str = "models/text-embedding-004"
    resume_rag_local_embedding_model: str = "all-mpnet-base-v2"
    resume_rag_embedding_dimension: int = 768

    # LLM (generation parameters are fixed when the model is built)
    resume_rag_llm_provider: str = "google"
    resume_rag_llm_model: str = "gemini-1.5-flash"
    resume_rag_temperature: float = 0.7
    resume_rag_top_p: float = 0.8
    resume_rag_top_k: int = 40
    resume_rag_max_output_tokens: int = 350

    # Storage
    resume_rag_vector_store: str = "chroma"
    resume_rag_chroma_path: str = "./data/chroma"
    resume_rag_collection: str = "profile_documents"

    # Retrieval
    resume_rag_match_threshold: float = 0.7
    resume_rag_match_count: int = 6
    resume_rag_max_context_tokens: int = 2400

    # Quota and edge rate limiting
    resume_rag_daily_query_cap: int = 10
    resume_rag_edge_rate_limit: int = 0
    resume_rag_edge_rate_window_s: float = 60.0

    # Transport
    resume_rag_cors_allow_origins: str = "https://ilanklimberg.com,http://localhost:8080"
    resume_rag_request_timeout_s: float = 30.0
    resume_rag_debug: bool = False

    # Access collaborators: sha256(api key) -> identity
    resume_rag_api_keys: dict[str, str] = {}
    resume_rag_interaction_log_path: str = "./data/interactions.jsonl"

    # Ingestion
    resume_rag_profile_path: str = "./resumeData.json"

    @property
    def chroma_path(self) -> Path:
        return Path(self.resume_rag_chroma_path)

    @property
    def profile_path(self) -> Path:
        return Path(self.resume_rag_profile_path)

    @property
    def interaction_log_path(self) -> Path:
        return Path(self.resume_rag_interaction_log_path)

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.resume_rag_cors_allow_origins.split(",") if o.strip()]

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


def get_settings() -> Settings:
    """Get application settings."""
    return Settings()
