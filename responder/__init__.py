from responder.core.reply import StructuredReply
from responder.pipeline import ResponsePipeline, build_pipeline

__all__ = ["ResponsePipeline", "StructuredReply", "build_pipeline"]
