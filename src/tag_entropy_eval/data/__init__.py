from tag_entropy_eval.data.sources import (
    FrameRecommendationSource,
    FrameTagSource,
    ItemTagSource,
    RecommendationSource,
)

__all__ = [
    "ItemTagSource",
    "RecommendationSource",
    "FrameTagSource",
    "FrameRecommendationSource",
]
