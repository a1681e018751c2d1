"""
Trivia - Game server for the TheoryBot quiz client.

An authenticated HTTP service that:
- Starts a quiz game for a user
- Serves the questions of that game one at a time
- Scores answers and reports final statistics
"""

__version__ = "0.1.0"
