# File: src/lms_assessment/controllers/attachment_controller.py

import logging
import uuid
from datetime import datetime
from typing import List

from sqlmodel import Session, select

from ..models.attachment import Attachment, AttachmentOwner
from ..schemas.attachment import AttachmentCreate
from ..utils.file import file_extension

logger = logging.getLogger(__name__)


def put_attachment(
    db: Session,
    owner: AttachmentOwner,
    payload: AttachmentCreate,
    uploaded_by: uuid.UUID,
) -> Attachment:
    """
    Record a reference to an already stored file. Only adds it to the session;
    the calling operation commits it together with its own changes.
    """
    attachment = Attachment(
        owner_type=owner.kind,
        owner_id=owner.id,
        file_name=payload.file_name,
        file_url=payload.file_url,
        file_size=payload.file_size,
        file_type=file_extension(payload.file_name) or None,
        mime_type=payload.mime_type,
        description=payload.description,
        sort_order=payload.sort_order,
        uploaded_by=uploaded_by,
    )
    db.add(attachment)
    logger.info(f"Attached '{payload.file_name}' to {owner.kind.value} {owner.id}")
    return attachment


def list_attachments(db: Session, owner: AttachmentOwner) -> List[Attachment]:
    statement = (
        select(Attachment)
        .where(
            Attachment.owner_type == owner.kind,
            Attachment.owner_id == owner.id,
            Attachment.deleted_at.is_(None),
        )
        .order_by(Attachment.sort_order, Attachment.created_at)
    )
    return list(db.exec(statement).all())


def detach_all(db: Session, owner: AttachmentOwner, deleted_at: datetime) -> int:
    """Tombstone every live attachment of an owner. Does not commit."""
    attachments = list_attachments(db, owner)
    for attachment in attachments:
        attachment.deleted_at = deleted_at
        db.add(attachment)
    if attachments:
        logger.info(f"Detached {len(attachments)} attachment(s) from {owner.kind.value} {owner.id}")
    return len(attachments)
