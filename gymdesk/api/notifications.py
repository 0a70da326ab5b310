from fastapi import APIRouter, Depends, HTTPException
from sqlmodel import Session

from gymdesk.api.errors import handle_errors
from gymdesk.database import get_session
from gymdesk.schemas.notification import ExpiringMemberships
from gymdesk.schemas.trainee import MessageLink
from gymdesk.services.messaging import expiry_reminder, whatsapp_digits, whatsapp_link
from gymdesk.services.notifications import expiry_notifier

router = APIRouter(prefix="/notifications", tags=["notifications"])

@router.get("/expiring", response_model=ExpiringMemberships)
async def expiring_memberships(session: Session = Depends(get_session)) -> ExpiringMemberships:
    """Active memberships expiring within the notice horizon"""
    with handle_errors("load notifications", session):
        expiry_notifier.start(session)
    memberships = expiry_notifier.expiring()
    return ExpiringMemberships(has_notifications=bool(memberships), memberships=memberships)

@router.get("/expiring/{trainee_id}/reminder", response_model=MessageLink)
async def expiry_reminder_link(trainee_id: int, session: Session = Depends(get_session)) -> MessageLink:
    """Renewal reminder for one expiring membership, ready for WhatsApp"""
    with handle_errors("load notifications", session):
        expiry_notifier.start(session)
    membership = next((m for m in expiry_notifier.expiring() if m.trainee_id == trainee_id), None)
    if membership is None:
        raise HTTPException(status_code=404, detail="No expiring membership for this trainee")

    message = expiry_reminder(membership.trainee_name, membership.expiry_date)
    return MessageLink(
        phone=whatsapp_digits(membership.phone_number),
        message=message,
        url=whatsapp_link(membership.phone_number, message)
    )
