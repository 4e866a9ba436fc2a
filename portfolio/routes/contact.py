"""
Public contact form.
"""
from fastapi import APIRouter, Depends, Request, status
import logging

from portfolio.exceptions import UpstreamError
from portfolio.repository import PortfolioRepository, get_repository
from portfolio.schemas import ContactMessageCreate
from portfolio.services import mail_service
from portfolio.utils.rate_limit import limiter, RATE_LIMITS

logger = logging.getLogger(__name__)

router = APIRouter(tags=["contact"])


@router.post("/contact", status_code=status.HTTP_201_CREATED)
@limiter.limit(RATE_LIMITS["contact"])
async def submit_contact_message(
    request: Request,
    data: ContactMessageCreate,
    repo: PortfolioRepository = Depends(get_repository)
):
    """
    Store a contact message, then try to email a notification.
    The response does not depend on whether the email went out.
    """
    try:
        message = await repo.create_contact_message(data.name, data.email, data.message)
    except Exception as e:
        logger.error(f"Error saving contact message: {str(e)}", exc_info=True)
        raise UpstreamError("Failed to save contact message")

    logger.info(f"Contact message saved: ID {message.id}")
    await mail_service.notify_contact_message(message)

    return {"success": True, "id": message.id}
