from minio import Minio
from minio.error import S3Error
import io
import logging
from docgen.core.config import settings
from typing import Dict, Optional

logger = logging.getLogger(__name__)

class StorageService:
    """Templates and rendered reports in a MinIO bucket."""

    def __init__(self):
        self._client: Optional[Minio] = None
        self.bucket = settings.MINIO_BUCKET

    @property
    def client(self) -> Minio:
        # Created on first use so importing the app never touches the network
        if self._client is None:
            self._client = Minio(
                settings.MINIO_ENDPOINT,
                access_key=settings.MINIO_ACCESS_KEY,
                secret_key=settings.MINIO_SECRET_KEY,
                secure=settings.MINIO_SECURE,
                region="us-east-1"  # Explicit region to avoid lookup
            )
            self._ensure_bucket(self._client)
        return self._client

    def _ensure_bucket(self, client: Minio):
        try:
            if not client.bucket_exists(self.bucket):
                client.make_bucket(self.bucket)
        except S3Error as exc:
            logger.warning("MinIO bucket check failed: %s", exc)

    def upload_file(self, object_name: str, file_content: bytes, metadata: Dict[str, str] = None) -> str:
        self.client.put_object(
            self.bucket, object_name, io.BytesIO(file_content),
            length=len(file_content),
            metadata=metadata
        )
        return object_name

    def download_file(self, object_name: str) -> Optional[bytes]:
        response = None
        try:
            response = self.client.get_object(self.bucket, object_name)
            return response.read()
        except S3Error as exc:
            logger.warning("Could not fetch %s: %s", object_name, exc)
            return None
        finally:
            if response is not None:
                response.close()
                response.release_conn()

    def find_object(self, prefix: str) -> Optional[str]:
        """Name of the first object under ``prefix``, if any."""
        for obj in self.client.list_objects(self.bucket, prefix=prefix):
            return obj.object_name
        return None

    def delete_file(self, object_name: str):
        self.client.remove_object(self.bucket, object_name)

storage_service = StorageService()
