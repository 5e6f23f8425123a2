"""Pipelines."""

from openlib_spine.pipelines.base import Pipeline, PipelineResult, PipelineStatus

__all__ = ["Pipeline", "PipelineResult", "PipelineStatus"]
