"""Join links and QR codes participants scan to reach a quiz."""

from __future__ import annotations

from dataclasses import dataclass

import segno

from live_quiz.constants.network_constants import (
    JOIN_PATH_TEMPLATE,
    QR_CODE_BORDER,
    QR_CODE_SCALE,
)


@dataclass(slots=True)
class JoinLink:
    url: str
    qr_data: str
    qr_code_data_url: str


def build_join_url(public_host: str, quiz_id: int) -> str:
    host = public_host.strip().rstrip("/")
    for scheme in ("https://", "http://"):
        if host.startswith(scheme):
            host = host[len(scheme):]
    return f"https://{host}{JOIN_PATH_TEMPLATE.format(quiz_id=quiz_id)}"


def build_join_link(public_host: str, quiz_id: int) -> JoinLink:
    """Join URL plus a PNG data URL of a QR code encoding exactly that URL."""
    url = build_join_url(public_host, quiz_id)
    qr = segno.make_qr(url, error="m")
    image = qr.png_data_uri(
        scale=QR_CODE_SCALE,
        border=QR_CODE_BORDER,
        dark="#000000",
        light="#FFFFFF",
    )
    return JoinLink(url=url, qr_data=url, qr_code_data_url=image)
