from typing import Any, Dict, List, Optional


class DocCollabError(Exception):
    """Базовая ошибка ядра совместной работы с документами"""

    status_code: int = 500
    default_detail: str = "Server error"

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.detail}


class NotFound(DocCollabError):
    """Документ или уведомление отсутствует, удалено или принадлежит другому пользователю"""

    status_code = 404
    default_detail = "Not found"


class AccessDenied(DocCollabError):
    """Недостаточно прав для операции"""

    status_code = 403
    default_detail = "Access denied"


class AuthenticationRequired(DocCollabError):
    """Приватный ресурс запрошен анонимно"""

    status_code = 401
    default_detail = "Authentication required"


class ValidationFailed(DocCollabError):
    """Некорректные входные данные с детализацией по полям"""

    status_code = 400
    default_detail = "Validation failed"

    def __init__(self, errors: Optional[List[Dict[str, str]]] = None, detail: Optional[str] = None):
        super().__init__(detail)
        self.errors = errors or []

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(errors=[{"field": field, "message": message}])

    def to_dict(self) -> Dict[str, Any]:
        return {"message": self.detail, "errors": self.errors}


class VersionConflict(DocCollabError):
    """Условная запись не прошла: документ изменен другим участником"""

    status_code = 409
    default_detail = "Document was modified concurrently, retry the request"

    def __init__(self, document_id: Any = None, expected_version: Optional[int] = None):
        super().__init__()
        self.document_id = document_id
        self.expected_version = expected_version


class DependencyUnavailable(DocCollabError):
    """Хранилище или каталог пользователей недоступны или не ответили вовремя"""

    status_code = 503
    default_detail = "Service temporarily unavailable"
