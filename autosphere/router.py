"""Central API router aggregating all domain routers."""

from fastapi import APIRouter

from autosphere.auth.router import router as auth_router
from autosphere.fulfillment.router import booking_router, rental_router
from autosphere.health.router import router as health_router
from autosphere.inquiry.router import router as inquiry_router
from autosphere.kyc.router import router as kyc_router
from autosphere.listing.router import router as listing_router
from autosphere.notification.router import broadcast_router
from autosphere.notification.router import router as notification_router
from autosphere.payment.router import router as payment_router
from autosphere.uploads.router import router as upload_router
from autosphere.user.router import router as user_router

api_router = APIRouter()

api_router.include_router(health_router)
api_router.include_router(auth_router)
api_router.include_router(user_router)
api_router.include_router(listing_router)
api_router.include_router(booking_router)
api_router.include_router(rental_router)
api_router.include_router(payment_router)
api_router.include_router(kyc_router)
api_router.include_router(notification_router)
api_router.include_router(broadcast_router)
api_router.include_router(inquiry_router)
api_router.include_router(upload_router)
