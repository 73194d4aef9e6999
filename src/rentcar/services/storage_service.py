import logging
import uuid
from typing import Optional

from rentcar.config.config import Config
from rentcar.services.database import BackendError
from rentcar.utils.aws_utils import AWSService
from rentcar.utils.file_utils import decode_data_url, extension_for, is_remote_url

logger = logging.getLogger(__name__)

# S3 SigV4 presigned URLs cannot outlive seven days
S3_URL_EXPIRATION = 7 * 24 * 3600


def upload_image(backend, image: str, folder: str, owner: Optional[str] = None) -> str:
    """
    Store a submitted image and return the URL to persist.

    Args:
        backend: Persistence backend, used for storage unless USE_S3 is set.
        image (str): base64 data URL, or a URL of an image already on file.
        folder (str): Storage folder, e.g. "selfies" or "ktp".
        owner (str): Optional user id / email used to group files.

    Returns:
        str: Retrievable URL of the stored image. URLs are returned unchanged.

    Raises:
        ValueError: If the image is neither a URL nor a data URL.
        BackendError: If the upload fails.
    """
    if is_remote_url(image):
        return image

    content, mime_type = decode_data_url(image)
    ext = extension_for(mime_type) or "bin"
    prefix = f"{folder}/{owner}" if owner else folder
    key = f"{prefix}/{uuid.uuid4().hex}.{ext}"

    if Config.USE_S3:
        aws = AWSService()
        if not aws.upload_object(content, key, mime_type):
            raise BackendError(f"upload of {key} to S3 failed")
        return aws.generate_presigned_url(key, expiration=S3_URL_EXPIRATION)

    url = backend.upload(key, content, mime_type)
    logger.info("Uploaded %s (%d bytes)", key, len(content))
    return url
