"""Jinja2 rendering of the OTP email, shared by every transport."""

import os
from dataclasses import dataclass

from jinja2 import Environment, FileSystemLoader, select_autoescape

from shared.datetime_utils import utcnow

_DEFAULT_TEMPLATE_DIR = os.path.join(
    os.path.dirname(os.path.dirname(os.path.dirname(__file__))),
    "templates",
    "emails",
)

OTP_SUBJECT = "Your OTP for {app_name} Verification"


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html_body: str
    text_body: str


class OtpEmailRenderer:
    def __init__(
        self,
        app_name: str = "Notes App",
        expires_minutes: int = 10,
        template_dir: str = _DEFAULT_TEMPLATE_DIR,
    ) -> None:
        self._app_name = app_name
        self._expires_minutes = expires_minutes
        self._jinja = Environment(
            loader=FileSystemLoader(template_dir),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, otp_code: str) -> RenderedEmail:
        template = self._jinja.get_template("otp.html")
        html_body = template.render(
            otp_code=otp_code,
            app_name=self._app_name,
            expires_minutes=self._expires_minutes,
            year=utcnow().year,
        )
        text_body = (
            f"Email Verification - {self._app_name}\n\n"
            f"Your verification code is: {otp_code}\n\n"
            f"This code expires in {self._expires_minutes} minutes.\n\n"
            f"If you didn't request this verification, please ignore this email."
        )
        return RenderedEmail(
            subject=OTP_SUBJECT.format(app_name=self._app_name),
            html_body=html_body,
            text_body=text_body,
        )
