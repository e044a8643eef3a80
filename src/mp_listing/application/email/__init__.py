"""Application email – outbound mail port, value object and in-memory fake."""
from mp_listing.application.email.message import EmailMessage
from mp_listing.application.email.sender import EmailSender
from mp_listing.application.email.in_memory import InMemoryEmailSender

__all__ = [
    "EmailMessage",
    "EmailSender",
    "InMemoryEmailSender",
]
