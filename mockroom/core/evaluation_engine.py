"""
Evaluation Engine for MockRoom

Produces the Evaluation stored on a session when it completes.

Scoring is pluggable: the built-in RandomizedScorer draws placeholder scores
in fixed bands and does not look at the responses. A real analysis engine
can be substituted by implementing Scorer.
"""

import logging
import random
from abc import ABC, abstractmethod

from mockroom.models.evaluation import Evaluation
from mockroom.models.interview import InterviewSession
from mockroom.prompts.narration import NarrationPrompts

logger = logging.getLogger(__name__)


class Scorer(ABC):
    """Turns a finished interview into an Evaluation."""
    
    @abstractmethod
    def score(self, session: InterviewSession, role: str) -> Evaluation:
        """
        Score a session whose responses are final.
        
        Args:
            session: Session with every recorded response
            role: Role label the candidate interviewed for
        """
        pass


class RandomizedScorer(Scorer):
    """
    Placeholder scorer.
    
    Each score is an independent uniform draw in [floor, floor + spread).
    """
    
    # (floor, spread) per dimension
    SCORE_BANDS: dict[str, tuple[int, int]] = {
        "overall": (70, 30),
        "communication": (65, 30),
        "technical": (60, 35),
        "body_language": (70, 25),
        "confidence": (65, 30),
        "presentation": (80, 20),
    }
    
    STRENGTHS = [
        "Clear communication",
        "Professional presence",
        "Good eye contact",
        "Relevant experience",
    ]
    
    IMPROVEMENTS = [
        "Technical depth",
        "Response structure",
        "Confidence in complex topics",
    ]
    
    def __init__(self, rng: random.Random | None = None):
        self.rng = rng or random.Random()
        self.prompts = NarrationPrompts()
    
    def score(self, session: InterviewSession, role: str) -> Evaluation:
        scores = {
            name: floor + self.rng.randrange(spread)
            for name, (floor, spread) in self.SCORE_BANDS.items()
        }
        
        logger.info(
            f"Scored session {session.id}: overall {scores['overall']} "
            f"({len(session.responses)}/{len(session.questions)} responses)"
        )
        
        return Evaluation(
            **scores,
            feedback=self.prompts.feedback(role),
            strengths=list(self.STRENGTHS),
            improvements=list(self.IMPROVEMENTS),
            question_scores={},
        )
