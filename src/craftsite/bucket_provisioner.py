"""BucketProvisioner: creates a public-read S3 bucket through the aws CLI.

Unlike every other step, a failure here does not abort the scaffold run:
it is reported back as a ProvisioningResult carrying an advisory.
"""

import json
import os
import re
from dataclasses import dataclass
from typing import Optional

from craftsite.errors import ExternalCommandError, ProvisioningError

FALLBACK_BUCKET_NAME = "craft-site"
MAX_BUCKET_NAME_LENGTH = 63


@dataclass(frozen=True)
class ProvisioningResult:
    """Outcome of a provisioning attempt."""

    bucket: str
    created: bool
    advisory: Optional[str] = None

    @classmethod
    def success(cls, bucket):
        return cls(bucket=bucket, created=True)

    @classmethod
    def recoverable(cls, bucket, reason):
        advisory = (
            f"Could not set up the S3 bucket '{bucket}': {reason}\n"
            "You'll have to create it and make it publicly readable manually."
        )
        return cls(bucket=bucket, created=False, advisory=advisory)


def derive_bucket_name(target_dir: str) -> str:
    """Derive an S3-compatible bucket name from the project directory."""
    base = os.path.basename(os.path.normpath(target_dir)).lower()
    name = re.sub(r"[^a-z0-9.-]+", "-", base)
    name = name[:MAX_BUCKET_NAME_LENGTH].strip("-.")
    if len(name) < 3:
        return FALLBACK_BUCKET_NAME
    return name


def public_read_policy(bucket: str) -> str:
    return json.dumps({
        "Version": "2012-10-17",
        "Statement": [{
            "Sid": "PublicReadGetObject",
            "Effect": "Allow",
            "Principal": "*",
            "Action": "s3:GetObject",
            "Resource": f"arn:aws:s3:::{bucket}/*",
        }],
    })


class BucketProvisioner:
    """Creates and opens up a bucket using an injected command runner."""

    def __init__(self, runner):
        self._runner = runner

    def provision(self, bucket: str) -> ProvisioningResult:
        try:
            self._check_credentials()
            self._create_bucket(bucket)
            self._make_public(bucket)
        except ProvisioningError as exc:
            return ProvisioningResult.recoverable(bucket, str(exc))
        return ProvisioningResult.success(bucket)

    def _aws(self, *args):
        try:
            return self._runner.run(["aws", *args])
        except ExternalCommandError as exc:
            raise ProvisioningError(str(exc)) from exc

    def _check_credentials(self):
        if not self._aws("configure", "get", "aws_access_key_id").strip():
            raise ProvisioningError("no AWS credentials are configured")

    def _create_bucket(self, bucket):
        self._aws("s3", "mb", f"s3://{bucket}")

    def _make_public(self, bucket):
        self._aws("s3api", "delete-public-access-block", "--bucket", bucket)
        self._aws(
            "s3api", "put-bucket-policy",
            "--bucket", bucket,
            "--policy", public_read_policy(bucket),
        )
