# storefront/utils/uploads.py
import logging
import time
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

# Public path the upload directory is mounted under
UPLOADS_URL_PREFIX = "/uploads"

_EXTENSIONS = {
    "image/jpeg": "jpg",
    "image/jpg": "jpg",
    "image/png": "png",
}


@dataclass
class PaymentProof:
    """An uploaded payment screenshot, fully buffered in memory."""

    filename: str
    content_type: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        return _EXTENSIONS.get(self.content_type, "bin")


def proof_filename(proof: PaymentProof) -> str:
    # Millisecond timestamp plus a random suffix keeps concurrent uploads apart
    return f"payment-{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}.{proof.extension}"


class LocalProofStore:
    """Writes payment proofs into the directory served under /uploads."""

    def __init__(self, upload_dir):
        self.upload_dir = Path(upload_dir)

    def save(self, proof: PaymentProof) -> str:
        self.upload_dir.mkdir(parents=True, exist_ok=True)
        name = proof_filename(proof)
        save_path = self.upload_dir / name
        with open(save_path, "wb") as buffer:
            buffer.write(proof.content)
        logger.debug("Stored payment proof %s (%s bytes)", save_path, proof.size)
        return f"{UPLOADS_URL_PREFIX}/{name}"
