"""
OfferFlow Interview Preparation Assistant

A personal job-search assistant for interview preparation including:
- AI-generated question banks per target company and role
- Answer drafting with AI coaching feedback
- Strategic self-introduction generation from your resume
- Quota-gated video mock interviews with an AI interviewer
- A points economy for unlocking extra practice sessions
"""

__version__ = "1.0.0"
