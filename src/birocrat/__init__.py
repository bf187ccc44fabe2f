"""Birocrat - branching forms driven by pure scripts."""

from .form import Answer, FormSession, Question, QuestionKind, Selected, Text
from .runtime import ScriptDriver

__version__ = "0.1.0"

__all__ = ["Answer", "FormSession", "Question", "QuestionKind", "ScriptDriver", "Selected", "Text"]
