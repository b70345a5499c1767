"""Round import pipelines."""

from .round_materializer import MaterializeResult, RoundMaterializer
from .udisc_importer import ImportOutcome, ImportPreview, UDiscImporter

__all__ = [
    'MaterializeResult',
    'RoundMaterializer',
    'ImportOutcome',
    'ImportPreview',
    'UDiscImporter',
]
