"""Chainable pipeline orchestration."""

from vision_chain.pipeline.pipeline import VisionPipeline, clone_buffer

__all__ = ["VisionPipeline", "clone_buffer"]
