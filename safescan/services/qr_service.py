#Builds the emergency QR code that responders scan to open an employee's profile
import base64
from io import BytesIO

import qrcode

from safescan.config import BASE_URL


def emergency_url(employee_id: str, base_url: str = BASE_URL) -> str:
    return f"{base_url.rstrip('/')}/emergency/{employee_id}"


def generate_qr_data_url(text: str) -> str:
    """Encode `text` as a PNG QR code and return it as a data URL."""
    img = qrcode.make(text)

    # Render into memory rather than writing a file to disk
    buf = BytesIO()
    img.save(buf)
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"
