import logging
from io import BytesIO

import boto3

from rentcar.config.config import Config

logger = logging.getLogger(__name__)


class AWSService:
    """
    AWS Service class to handle document image uploads to S3.
    """

    def __init__(self):
        self.s3 = boto3.client(
            's3',
            aws_access_key_id=Config.AWS_ACCESS_KEY,
            aws_secret_access_key=Config.AWS_SECRET_KEY,
            region_name=Config.REGION_NAME
        )
        self.bucket_name = Config.S3_BUCKET_NAME

    def upload_object(self, content: bytes, s3_key: str, mime_type: str) -> bool:
        """
        Upload in-memory bytes to S3.

        Args:
            content (bytes): The raw file content to upload.
            s3_key (str): The destination key (path) inside the S3 bucket.
            mime_type (str): MIME type (Content-Type) of the uploaded object.

        Returns:
            bool: True if upload was successful, False otherwise.
        """
        try:
            self.s3.upload_fileobj(
                BytesIO(content),
                self.bucket_name,
                s3_key,
                ExtraArgs={'ContentType': mime_type}
            )
        except Exception as e:
            logger.error("Error uploading file object to S3: %s", e)
            return False
        return True

    def generate_presigned_url(self, key: str, expiration: int = 3600) -> str:
        """
        Generate a presigned URL to share an S3 object.
        Args:
            key (str): S3 object key.
            expiration (int): Time in seconds for the presigned URL to remain valid.
        Returns:
            str: Presigned URL as a string.
        """
        return self.s3.generate_presigned_url(
            'get_object',
            Params={
                'Bucket': self.bucket_name,
                'Key': key,
            },
            ExpiresIn=expiration
        )
