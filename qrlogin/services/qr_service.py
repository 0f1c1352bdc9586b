import base64
import io

import qrcode

from qrlogin.core.config import settings

DATA_URL_PREFIX = "data:image/png;base64,"


class QRService:
    @staticmethod
    def create_qr_image(data_str: str) -> str:
        """
        Creates a QR code image and returns it as a base64 string
        """
        qr = qrcode.QRCode(
            version=None,
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=settings.QR_BOX_SIZE,
            border=settings.QR_BORDER,
        )
        qr.add_data(data_str)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        return base64.b64encode(buffered.getvalue()).decode()

    @staticmethod
    def to_data_url(data_str: str) -> str:
        return DATA_URL_PREFIX + QRService.create_qr_image(data_str)
