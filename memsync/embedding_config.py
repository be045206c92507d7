"""Configuration for embedding usage to manage OpenAI API quota."""

from memsync.config import settings

class EmbeddingConfig:
    """Decides whether OpenAI or the local fallback produces vectors."""
    
    def __init__(self, api_key: str = None, disabled: bool = None, use_fallback_only: bool = None):
        self.api_key = settings.OPENAI_API_KEY if api_key is None else api_key
        self.disabled = settings.DISABLE_EMBEDDINGS if disabled is None else disabled
        self.use_fallback_only = settings.USE_FALLBACK_EMBEDDINGS if use_fallback_only is None else use_fallback_only
        self.model = settings.EMBEDDING_MODEL
        self.dimensions = settings.EMBEDDING_DIMENSIONS
        
    def should_use_embeddings(self) -> bool:
        """Check if OpenAI embeddings should be used based on configuration."""
        return bool(self.api_key) and not self.disabled and not self.use_fallback_only
    
    def get_fallback_message(self) -> str:
        """Get message explaining why fallback embeddings are being used."""
        if self.disabled:
            return "Embeddings disabled due to quota management"
        elif self.use_fallback_only:
            return "Using fallback embeddings to conserve API quota"
        else:
            return "No OpenAI API key configured"

# Global configuration instance
embedding_config = EmbeddingConfig()
