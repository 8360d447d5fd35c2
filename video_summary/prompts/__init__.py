"""
Prompt templates for the video summary pipeline.
"""

from .ad_summary import AD_SUMMARY_TEMPLATE, build_analysis_prompt

__all__ = ["AD_SUMMARY_TEMPLATE", "build_analysis_prompt"]
