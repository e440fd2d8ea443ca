import base64
from io import BytesIO

import qrcode


def generate_qr_code(data: str, box_size: int = 8, border: int = 4) -> str:
    """
    Génère un QR code (PNG) à partir d'une chaîne et le retourne en data URI base64.

    Args:
        data: contenu à encoder (ex: URI "bitcoin:<adresse>?amount=...")
        box_size: taille en pixels de chaque module
        border: largeur de la marge (en modules)

    Returns:
        "data:image/png;base64,..." directement utilisable dans un <img src>
    """
    qr = qrcode.QRCode(
        # version libre: une adresse bech32 + paramètres dépasse la version 1
        version=None,
        error_correction=qrcode.constants.ERROR_CORRECT_M,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    buffered = BytesIO()
    qr.make_image(fill_color="black", back_color="white").save(buffered, format="PNG")
    encoded = base64.b64encode(buffered.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
