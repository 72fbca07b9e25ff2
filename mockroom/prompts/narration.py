"""
AI Interviewer Narration Templates

Contains the spoken lines for:
- Greeting
- Transitions between questions
- Closing message
- Written feedback on the results view
"""


class NarrationPrompts:
    """
    Spoken lines for the AI interviewer.
    
    Key principles:
    - Address the candidate by name
    - Name the role being interviewed for
    - Keep transitions short so the question follows quickly
    """
    
    GREETING = (
        "Hello {name}! Welcome to your interview for the {role}. "
        "I'm your AI interviewer, and I'll be asking you {count} {noun} today. "
        "Let's begin with the first question."
    )
    
    TRANSITION = "Great! Now let's move to question {number}."
    
    CLOSING = (
        "Thank you {name}! You've completed your interview for the {role}. "
        "Your responses have been recorded and analyzed. "
        "You'll receive detailed feedback shortly. Have a great day!"
    )
    
    FEEDBACK = (
        "Strong performance for the {role}. Good communication skills and "
        "professional presentation. Consider improving technical depth in responses."
    )
    
    def greeting(self, name: str, role: str, question_count: int) -> str:
        noun = "question" if question_count == 1 else "questions"
        return self.GREETING.format(name=name, role=role, count=question_count, noun=noun)
    
    def transition(self, question_number: int) -> str:
        """Transition line; question_number is 1-based."""
        return self.TRANSITION.format(number=question_number)
    
    def closing(self, name: str, role: str) -> str:
        return self.CLOSING.format(name=name, role=role)
    
    def feedback(self, role: str) -> str:
        return self.FEEDBACK.format(role=role)
