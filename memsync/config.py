"""Configuration settings for the observation sync service."""
import os


def _env_flag(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from environment variables."""
    
    # SQLite Configuration
    SQLITE_DB_PATH: str = os.getenv("SQLITE_DB_PATH", "memsync.db")
    
    # ChromaDB Configuration
    CHROMADB_PATH: str = os.getenv("CHROMADB_PATH", "./chroma_db")
    CHROMADB_COLLECTION: str = os.getenv("CHROMADB_COLLECTION", "observations")
    IS_EPHEMERAL_CHROMA: bool = _env_flag("IS_EPHEMERAL_CHROMA")
    CHROMA_BATCH_SIZE: int = int(os.getenv("CHROMA_BATCH_SIZE", "100"))
    
    # Embedding Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
    EMBEDDING_DIMENSIONS: int = int(os.getenv("EMBEDDING_DIMENSIONS", "1536"))
    USE_FALLBACK_EMBEDDINGS: bool = _env_flag("USE_FALLBACK_EMBEDDINGS")
    DISABLE_EMBEDDINGS: bool = _env_flag("DISABLE_EMBEDDINGS")
    
    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "127.0.0.1")
    API_PORT: int = int(os.getenv("API_PORT", "37777"))
    API_WORKERS: int = int(os.getenv("API_WORKERS", "1"))
    
    # Logging Configuration
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    
    # Security Configuration
    CORS_ORIGINS: list = os.getenv("CORS_ORIGINS", "*").split(",")
    
    @classmethod
    def validate(cls) -> bool:
        """Validate required settings."""
        if not cls.OPENAI_API_KEY:
            print("⚠️  Warning: OPENAI_API_KEY not set. Observations will be indexed with fallback embeddings.")
        return True

# Global settings instance
settings = Settings()
