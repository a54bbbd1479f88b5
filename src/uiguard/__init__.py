"""uiguard: streaming validation and retry orchestration for LLM-generated UI schemas."""

__version__ = "0.4.0"
