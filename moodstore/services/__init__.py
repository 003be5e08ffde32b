# Core services

from .mood_scorer import (
    QUIZ_QUESTIONS,
    score_answers,
    apply_preferences,
    record_selection,
    top_moods,
)
from .invoice_renderer import (
    InvoiceData,
    InvoiceLine,
    InvoiceCustomer,
    render_invoice,
    format_money,
    invoice_filename,
)
from .mood_detector import MoodDetector

__all__ = [
    "QUIZ_QUESTIONS",
    "score_answers",
    "apply_preferences",
    "record_selection",
    "top_moods",
    "InvoiceData",
    "InvoiceLine",
    "InvoiceCustomer",
    "render_invoice",
    "format_money",
    "invoice_filename",
    "MoodDetector",
]
