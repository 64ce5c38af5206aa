"""
Service de stockage des médias (images, pdf, vidéos...)

Deux implémentations de BlobStorage:
- LocalBlobStorage: fichiers sur disque, servis par l'API sous UPLOAD_BASE_URL
- CloudinaryBlobStorage: SDK cloudinary (upload, destroy, URLs transformées)

Le stockage est passé aux routes par la dépendance get_blob_storage(),
ce qui permet de le remplacer dans les tests.
"""

import io
import logging
import mimetypes
import uuid
from pathlib import Path
from typing import BinaryIO, List, Optional

import cloudinary
import cloudinary.uploader
import cloudinary.utils
from cloudinary.exceptions import Error as CloudinaryError

from notely.core.config import settings
from notely.core.exceptions import NotFoundError, StorageError, ValidationFailedError

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "image/svg+xml",
    "video/mp4",
    "video/webm",
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
    "text/markdown",
}


def validate_upload(filename: str, content_type: Optional[str], data: bytes, max_size: int = None) -> None:
    max_size = max_size or settings.MAX_UPLOAD_SIZE
    if not data:
        raise ValidationFailedError("No file provided")
    if content_type not in ALLOWED_MIME_TYPES:
        raise ValidationFailedError(f"File type {content_type} is not allowed")
    if len(data) > max_size:
        raise ValidationFailedError(f"File {filename} exceeds {max_size} bytes")


def read_upload(stream: BinaryIO, filename: str, max_size: int = None) -> bytes:
    """Lit au plus max_size + 1 octets, un fichier trop gros est refusé sans être chargé en entier"""
    max_size = max_size or settings.MAX_UPLOAD_SIZE
    data = stream.read(max_size + 1)
    if len(data) > max_size:
        raise ValidationFailedError(f"File {filename} exceeds {max_size} bytes")
    return data


def resource_type_for(content_type: str) -> str:
    if content_type.startswith("image/"):
        return "image"
    if content_type.startswith("video/"):
        return "video"
    return "raw"


class BlobStorage:
    """Contrat: upload(bytes) -> métadonnées + URL, delete(public_id), optimized_url(public_id)"""

    def upload(self, data: bytes, filename: str, content_type: str, folder: str = "notely") -> dict:
        raise NotImplementedError

    def delete(self, public_id: str) -> None:
        raise NotImplementedError

    def optimized_url(self, public_id: str, **transformation) -> str:
        raise NotImplementedError


class LocalBlobStorage(BlobStorage):

    def __init__(self, base_path: str, base_url: str = "/uploads"):
        self.base_path = Path(base_path).resolve()
        self.base_url = base_url.rstrip("/")
        self.base_path.mkdir(parents=True, exist_ok=True)

    def _resolve(self, public_id: str) -> Path:
        # pas de sortie du dossier racine (../)
        path = (self.base_path / public_id).resolve()
        if self.base_path not in path.parents:
            raise ValidationFailedError(f"Invalid public id: {public_id}")
        return path

    def upload(self, data: bytes, filename: str, content_type: str, folder: str = "notely") -> dict:
        extension = Path(filename).suffix.lower() or mimetypes.guess_extension(content_type) or ""
        public_id = f"{settings.UPLOAD_FOLDER}/{folder}/{uuid.uuid4().hex}{extension}"
        path = self._resolve(public_id)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)

        url = f"{self.base_url}/{public_id}"
        logger.info(f"Stored {filename} as {public_id} ({len(data)} bytes)")
        return {
            "public_id": public_id,
            "secure_url": url,
            "url": url,
            "width": None,
            "height": None,
            "format": extension.lstrip("."),
            "bytes": len(data),
            "resource_type": resource_type_for(content_type),
        }

    def delete(self, public_id: str) -> None:
        path = self._resolve(public_id)
        if not path.is_file():
            raise NotFoundError("File not found")
        path.unlink()

    def optimized_url(self, public_id: str, **transformation) -> str:
        # pas de transformation en local, le fichier est servi tel quel
        path = self._resolve(public_id)
        if not path.is_file():
            raise NotFoundError("File not found")
        return f"{self.base_url}/{public_id}"


class CloudinaryBlobStorage(BlobStorage):

    def __init__(self, cloud_name: str, api_key: str, api_secret: str):
        if not cloud_name or not api_key or not api_secret:
            raise StorageError(
                "Cloudinary credentials are missing: "
                "CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY, CLOUDINARY_API_SECRET"
            )
        cloudinary.config(cloud_name=cloud_name, api_key=api_key, api_secret=api_secret, secure=True)
        self.cloud_name = cloud_name
        logger.info(f"Cloudinary configured with cloud_name: {cloud_name}")

    def upload(self, data: bytes, filename: str, content_type: str, folder: str = "notely") -> dict:
        options = {
            "folder": f"{settings.UPLOAD_FOLDER}/{folder}",
            "resource_type": "auto",
            "use_filename": True,
            "unique_filename": True,
            "overwrite": False,
            "filename_override": filename,
        }
        if content_type.startswith("image/"):
            options["transformation"] = [{"quality": "auto:good", "fetch_format": "auto"}]

        try:
            result = cloudinary.uploader.upload(io.BytesIO(data), **options)
        except CloudinaryError as e:
            logger.error(f"Cloudinary upload failed: {e}")
            raise StorageError(f"Failed to upload file: {e}")

        return {
            "public_id": result["public_id"],
            "secure_url": result["secure_url"],
            "url": result.get("url", result["secure_url"]),
            "width": result.get("width"),
            "height": result.get("height"),
            "format": result.get("format", ""),
            "bytes": result.get("bytes", len(data)),
            "resource_type": result.get("resource_type", resource_type_for(content_type)),
        }

    def delete(self, public_id: str) -> None:
        try:
            result = cloudinary.uploader.destroy(public_id)
        except CloudinaryError as e:
            logger.error(f"Cloudinary delete failed: {e}")
            raise StorageError(f"Failed to delete file: {e}")

        if result.get("result") == "not found":
            raise NotFoundError("File not found")

    def optimized_url(self, public_id: str, **transformation) -> str:
        # width / height / quality / format, les valeurs None sont ignorées
        transformation = {key: value for key, value in transformation.items() if value is not None}
        url, _ = cloudinary.utils.cloudinary_url(public_id, secure=True, transformation=[transformation])
        return url


def get_blob_storage() -> BlobStorage:
    """Dépendance FastAPI: construit le stockage choisi par STORAGE_BACKEND"""
    if settings.STORAGE_BACKEND == "cloudinary":
        return CloudinaryBlobStorage(
            settings.CLOUDINARY_CLOUD_NAME,
            settings.CLOUDINARY_API_KEY,
            settings.CLOUDINARY_API_SECRET,
        )
    return LocalBlobStorage(settings.UPLOAD_DIR, settings.UPLOAD_BASE_URL)


def upload_files(storage: BlobStorage, files: List[tuple], folder: str = "notely") -> List[dict]:
    """files: liste de (filename, content_type, data). Tout est validé avant le premier upload."""
    if not files:
        raise ValidationFailedError("No files provided")
    for filename, content_type, data in files:
        validate_upload(filename, content_type, data)
    return [storage.upload(data, filename, content_type, folder) for filename, content_type, data in files]
