from __future__ import annotations

import io

import qrcode


def render_label_png(barcode: str) -> io.BytesIO:
    """QR label for a stock barcode, ready for ``send_file``."""
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=8,
        border=4,
    )
    qr.add_data(barcode)
    qr.make(fit=True)
    img = qr.make_image(fill_color="black", back_color="white")

    buf = io.BytesIO()
    img.save(buf, format="PNG")
    buf.seek(0)
    return buf
