"""Request and payload builders used across the test modules."""

import base64
import io

from PIL import Image


def basic_auth_header(email: str, password: str) -> dict:
    credentials = base64.b64encode(f'{email}:{password}'.encode()).decode()
    return {'Authorization': f'Basic {credentials}'}


def make_png(width: int = 800, height: int = 600) -> bytes:
    buffer = io.BytesIO()
    Image.new('RGB', (width, height), color=(200, 30, 30)).save(buffer, format='PNG')
    return buffer.getvalue()


def b64(data: bytes) -> str:
    return base64.b64encode(data).decode()
