"""FastAPI adapter – listing router and error mapping."""
from mp_listing.adapters.fastapi.exception_mapper import FastAPIExceptionMapper
from mp_listing.adapters.fastapi.routers import ListingContext, build_listing_router

__all__ = ["FastAPIExceptionMapper", "ListingContext", "build_listing_router"]
