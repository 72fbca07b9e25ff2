"""
Prompt templates for MockRoom's AI interviewer.
"""

from mockroom.prompts.narration import NarrationPrompts

__all__ = ["NarrationPrompts"]
