"""SMTP adapter – outbound mail over aiosmtplib."""
from mp_listing.adapters.smtp.sender import SmtpConfig, SmtpEmailSender

__all__ = ["SmtpConfig", "SmtpEmailSender"]
