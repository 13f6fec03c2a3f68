import io
from pathlib import Path

from PIL import Image

TEST_SECRET_KEY = "test_secret_key"


def make_image_bytes(fmt: str = "PNG", size=(8, 8), color=(200, 30, 30)) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", size, color).save(buffer, format=fmt)
    return buffer.getvalue()


def uploaded_files(upload_dir: Path):
    """Names of the files currently in the upload directory."""
    if not upload_dir.exists():
        return []
    return sorted(p.name for p in upload_dir.iterdir())
