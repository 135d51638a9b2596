from tag_entropy_eval.evaluation.metrics.tag_entropy import TagEntropyAccumulator, TagEntropyMetric, tag_entropy

__all__ = [
    "tag_entropy",
    "TagEntropyAccumulator",
    "TagEntropyMetric",
]
