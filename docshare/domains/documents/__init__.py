from docshare.domains.documents.entities import Document, DocumentPatch, Grant, Permission, Visibility
from docshare.domains.documents.services import DocumentService, MutationResult

__all__ = [
    "Document", "DocumentPatch", "Grant", "Permission", "Visibility",
    "DocumentService", "MutationResult"
]
