from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from pizza_mvp.config import settings
from pizza_mvp.db.session import get_async_session
from pizza_mvp.services.email import EmailService
from pizza_mvp.services.location import LocationService
from pizza_mvp.services.payments import StripeCheckoutGateway


def get_location_service(db: AsyncSession = Depends(get_async_session)) -> LocationService:
    return LocationService(db)


def get_checkout_gateway() -> StripeCheckoutGateway:
    return StripeCheckoutGateway(
        api_key=settings.STRIPE_SECRET_KEY,
        currency=settings.STRIPE_CURRENCY,
        success_url=settings.CHECKOUT_SUCCESS_URL,
        cancel_url=settings.CHECKOUT_CANCEL_URL,
    )


def get_email_service() -> EmailService:
    return EmailService(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD,
        use_tls=settings.SMTP_USE_TLS,
        sender=settings.EMAIL_FROM,
    )
