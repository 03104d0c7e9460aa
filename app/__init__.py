"""
InternHub
A student collaboration platform backend.

Architecture:
- MongoDB: projects, internships, applications, profiles
- In-memory store: fallback when MongoDB is not available
- Recommendations: skill-overlap ranking, no external AI
"""

__version__ = "1.0.0"
