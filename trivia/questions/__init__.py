"""
Questions Module - Where game questions come from.
"""

from .bank import Question, QuestionBank, QuestionBankError

__all__ = [
    "Question",
    "QuestionBank",
    "QuestionBankError",
]
