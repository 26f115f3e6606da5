import logging
import re
from dataclasses import dataclass, field
from typing import List, Sequence

from docshare.core.resilience import bounded
from docshare.domains.documents.entities import Document, Grant, Permission
from docshare.domains.identity.contracts import IdentityDirectory
from docshare.domains.identity.entities import Identity
from docshare.domains.notifications.entities import NotificationDraft, NotificationType

logger = logging.getLogger(__name__)

MENTION_PATTERN = re.compile(r"@(\w+)")


def extract_mentions(content: str) -> List[str]:
    """Токены упоминаний `@имя` без повторов, в порядке первого появления"""
    return list(dict.fromkeys(MENTION_PATTERN.findall(content or "")))


def mention_message(sender: Identity, title: str) -> str:
    return f'{sender.display_name} mentioned you in "{title}"'


@dataclass
class AutoShareResult:
    new_grants: List[Grant] = field(default_factory=list)
    notifications: List[NotificationDraft] = field(default_factory=list)


class MentionEngine:
    """Разрешение упоминаний в пользователей и автоматический доступ на чтение"""

    def __init__(self, directory: IdentityDirectory, timeout: float):
        self.directory = directory
        self.timeout = timeout

    async def resolve(self, token: str) -> Sequence[Identity]:
        # Несколько совпадений по одному токену обрабатываются все
        return await bounded(
            self.directory.find_by_name_prefix(token), self.timeout, "Identity directory"
        )

    async def resolve_and_auto_share(
        self,
        document: Document,
        mention_tokens: Sequence[str],
        actor: Identity
    ) -> AutoShareResult:
        """Новые записи доступа и черновики уведомлений для упомянутых.

        Уже имеющие доступ пользователи, автор и сам действующий
        пользователь пропускаются, поэтому повторный прогон по тому же
        снимку ничего не добавляет.
        """
        result = AutoShareResult()
        known = {grant.user_id for grant in document.shared_with}

        for token in mention_tokens:
            for identity in await self.resolve(token):
                if identity.id in (actor.id, document.author_id) or identity.id in known:
                    continue

                known.add(identity.id)
                result.new_grants.append(Grant(user_id=identity.id, permission=Permission.VIEW))
                result.notifications.append(
                    NotificationDraft(
                        recipient_id=identity.id,
                        sender_id=actor.id,
                        type=NotificationType.MENTION,
                        document_id=document.id,
                        message=mention_message(actor, document.title)
                    )
                )

        if result.new_grants:
            logger.info(
                f"Document {document.id}: mentions {list(mention_tokens)} auto-shared with "
                f"{len(result.new_grants)} user(s)"
            )
        return result
