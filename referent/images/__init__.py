"""Image generation modules."""

from .huggingface import CANDIDATE_MODELS, GeneratedImage, RetryPolicy, generate_image

__all__ = ["CANDIDATE_MODELS", "GeneratedImage", "RetryPolicy", "generate_image"]
