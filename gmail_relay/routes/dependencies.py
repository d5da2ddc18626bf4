"""
Gmail Relay — Route Dependencies
=================================

What:  FastAPI dependency exposing the MailService bound by create_app().
"""

from fastapi import Request

from gmail_relay.services.mail_service import MailService


def get_mail_service(request: Request) -> MailService:
    return request.app.state.mail_service
