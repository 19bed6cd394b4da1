"""careerforge - scoring lessicale ed embedding di fallback per resume e job description."""

__version__ = "0.1.0"
