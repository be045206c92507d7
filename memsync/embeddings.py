from typing import List, Optional
import hashlib
import math
import re
from openai import OpenAI
from memsync.embedding_config import EmbeddingConfig, embedding_config
from memsync.logging import get_logger

logger = get_logger(__name__)

_TOKEN_RE = re.compile(r"[a-z0-9_./-]+")

_client: Optional[OpenAI] = None

def _get_client(api_key: str) -> OpenAI:
    global _client
    if _client is None:
        _client = OpenAI(api_key=api_key)
    return _client

def embed(texts: List[str], config: EmbeddingConfig = None) -> List[List[float]]:
    """Generate embeddings for a list of texts.
    
    Uses the configured OpenAI embedding model when an API key is available,
    otherwise deterministic hashed vectors of the same dimensionality so a
    collection never mixes vector sizes. OpenAI errors propagate.
    """
    config = config or embedding_config
    if not texts:
        return []
    
    if not config.should_use_embeddings():
        logger.debug(f"Using fallback embeddings: {config.get_fallback_message()}")
        return generate_fallback_embeddings(texts, config.dimensions)
    
    response = _get_client(config.api_key).embeddings.create(
        model=config.model,
        input=texts,
        dimensions=config.dimensions,
    )
    return [data.embedding for data in sorted(response.data, key=lambda d: d.index)]

def generate_fallback_embeddings(texts: List[str], dimensions: int) -> List[List[float]]:
    """Hashed bag-of-words vectors, L2-normalized.
    
    Not semantic, but texts sharing words land close together, which is
    enough for local development and tests.
    """
    embeddings = []
    
    for text in texts:
        vector = [0.0] * dimensions
        for token in _TOKEN_RE.findall(text.lower()):
            digest = hashlib.md5(token.encode()).digest()
            bucket = int.from_bytes(digest[:4], "big") % dimensions
            sign = 1.0 if digest[4] & 1 else -1.0
            vector[bucket] += sign
        
        norm = math.sqrt(sum(v * v for v in vector))
        if norm:
            vector = [v / norm for v in vector]
        embeddings.append(vector)
    
    return embeddings
