"""CSV tokenizing, header resolution and reconciliation for UDisc exports."""

from .csv_tokenizer import tokenize, split_csv_line
from .header_resolver import resolve_columns, normalize_header
from .round_reconciler import RoundReconciler, reconcile

__all__ = [
    'tokenize',
    'split_csv_line',
    'resolve_columns',
    'normalize_header',
    'RoundReconciler',
    'reconcile',
]
