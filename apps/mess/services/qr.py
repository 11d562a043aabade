"""QR image rendering for order and coupon codes."""

from io import BytesIO

import qrcode


def render_qr_png(data: str) -> bytes:
    """
    Render ``data`` as a PNG QR code.

    Uses error correction level M, which keeps codes scannable from a
    phone screen with some glare.
    """
    qr = qrcode.QRCode(
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=10,
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = BytesIO()
    img.save(buffer, format='PNG')
    return buffer.getvalue()
