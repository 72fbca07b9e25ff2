"""
MockRoom - AI Mock Interview Platform

Guides candidates through a simulated video interview with a narrated
AI interviewer, and stores the synthesized evaluation for the results view.
"""

__version__ = "0.1.0"
__author__ = "MockRoom Team"
