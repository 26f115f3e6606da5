from fastapi import APIRouter, Depends, Query, status
from typing import Optional
import uuid

from docshare.api.deps import get_document_service, get_optional_requester, get_requester
from docshare.domains.documents.schemas import (
    DocumentCreate, DocumentUpdate, DocumentShareRequest, DocumentResponse,
    DocumentMutationResponse, DocumentListResponse, DocumentHistoryResponse,
    DocumentInfo, HistoryEntryResponse
)
from docshare.domains.documents.services import DocumentService, MutationResult

router = APIRouter(prefix="/documents", tags=["documents"])


def _mutation_response(result: MutationResult) -> DocumentMutationResponse:
    return DocumentMutationResponse(
        document=DocumentResponse.from_document(result.document),
        failed_notifications=[failed.draft.recipient_id for failed in result.failed_notifications]
    )


@router.get("", response_model=DocumentListResponse)
async def list_documents(
    search: Optional[str] = Query(None, max_length=200),
    page: int = Query(1, ge=1),
    limit: Optional[int] = Query(None, ge=1, le=100),
    requester_id: uuid.UUID = Depends(get_requester),
    service: DocumentService = Depends(get_document_service)
):
    """Получение списка доступных документов"""
    result = await service.list_documents(requester_id, search=search, page=page, per_page=limit)

    return DocumentListResponse(
        documents=[DocumentResponse.from_document(document) for document in result.documents],
        total=result.total,
        total_pages=result.total_pages,
        current_page=result.page
    )


@router.post("", response_model=DocumentMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_document(
    document_data: DocumentCreate,
    requester_id: uuid.UUID = Depends(get_requester),
    service: DocumentService = Depends(get_document_service)
):
    """Создание нового документа"""
    result = await service.create_document(requester_id, document_data)
    return _mutation_response(result)


@router.get("/{document_id}", response_model=DocumentResponse)
async def get_document(
    document_id: uuid.UUID,
    requester_id: Optional[uuid.UUID] = Depends(get_optional_requester),
    service: DocumentService = Depends(get_document_service)
):
    """Получение документа по UUID"""
    document = await service.get_document(document_id, requester_id)
    return DocumentResponse.from_document(document)


@router.put("/{document_id}", response_model=DocumentMutationResponse)
async def update_document(
    document_id: uuid.UUID,
    document_data: DocumentUpdate,
    requester_id: uuid.UUID = Depends(get_requester),
    service: DocumentService = Depends(get_document_service)
):
    """Обновление документа"""
    result = await service.update_document(document_id, requester_id, document_data)
    return _mutation_response(result)


@router.delete("/{document_id}")
async def delete_document(
    document_id: uuid.UUID,
    requester_id: uuid.UUID = Depends(get_requester),
    service: DocumentService = Depends(get_document_service)
):
    """Удаление документа"""
    await service.delete_document(document_id, requester_id)
    return {"success": True, "message": "Document deleted successfully"}


@router.get("/{document_id}/history", response_model=DocumentHistoryResponse)
async def get_document_history(
    document_id: uuid.UUID,
    requester_id: uuid.UUID = Depends(get_requester),
    service: DocumentService = Depends(get_document_service)
):
    """История изменений документа"""
    view = await service.get_history(document_id, requester_id)

    return DocumentHistoryResponse(
        history=[HistoryEntryResponse.from_entry(entry) for entry in view.entries],
        document_info=DocumentInfo(
            title=view.document.title,
            current_visibility=view.document.visibility,
            current_tags=list(view.document.tags)
        )
    )


@router.post("/{document_id}/share", response_model=DocumentMutationResponse)
async def share_document(
    document_id: uuid.UUID,
    share_data: DocumentShareRequest,
    requester_id: uuid.UUID = Depends(get_requester),
    service: DocumentService = Depends(get_document_service)
):
    """Предоставление доступа к документу"""
    result = await service.share_document(
        document_id, requester_id, share_data.email, share_data.permission
    )
    return _mutation_response(result)


@router.delete("/{document_id}/share/{user_id}", response_model=DocumentMutationResponse)
async def unshare_document(
    document_id: uuid.UUID,
    user_id: uuid.UUID,
    requester_id: uuid.UUID = Depends(get_requester),
    service: DocumentService = Depends(get_document_service)
):
    """Отзыв доступа к документу"""
    result = await service.unshare_document(document_id, requester_id, user_id)
    return _mutation_response(result)
