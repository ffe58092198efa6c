"""Recoding helpers for questionnaire responses."""

from src.recoding.recode import dummy_code_binary, reverse_scale, split_multiple_answers

__all__ = [
    "dummy_code_binary",
    "reverse_scale",
    "split_multiple_answers",
]
