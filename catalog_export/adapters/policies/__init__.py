from .auth import AuthExportPolicy
from .bib import BibExportPolicy

__all__ = ['AuthExportPolicy', 'BibExportPolicy']
