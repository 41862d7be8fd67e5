# Path: gallery_search/embedders/__init__.py
# Purpose: Package initializer for embedder implementations and interfaces.
# Layer: gallery_search/embedders.
# Details: Exposes the base interface, the hash embedder, the embedding cache, and the byte codec.

from .base import Embedder, tokenize
from .cache import EmbeddingCache
from .codec import decode_embedding, encode_embedding
from .hash_embedder import HashEmbedder, java_string_hash

__all__ = [
    "Embedder",
    "EmbeddingCache",
    "HashEmbedder",
    "decode_embedding",
    "encode_embedding",
    "java_string_hash",
    "tokenize",
]
