from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod

import boto3
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)


class CacheInvalidator(ABC):
    @abstractmethod
    def invalidate(self, domain: str) -> bool:
        """Purge the cached copy of a site. Returns True if a purge was issued."""


class NullInvalidator(CacheInvalidator):
    def invalidate(self, domain):
        logger.debug("No CDN configured, skipping invalidation for %s", domain)
        return False


class CloudFrontInvalidator(CacheInvalidator):
    def __init__(self, distribution_id: str, region: str, client=None):
        self.distribution_id = distribution_id
        self.region = region
        self._client = client

    @property
    def client(self):
        if self._client is None:
            self._client = boto3.client("cloudfront", region_name=self.region)
        return self._client

    def invalidate(self, domain):
        try:
            self.client.create_invalidation(
                DistributionId=self.distribution_id,
                InvalidationBatch={
                    "CallerReference": f"{domain}-{int(time.time() * 1000)}",
                    "Paths": {"Quantity": 1, "Items": [f"/{domain}/*"]},
                },
            )
        except (BotoCoreError, ClientError) as exc:
            logger.error("CloudFront invalidation for %s failed: %s", domain, exc)
            return False

        logger.info("CloudFront invalidation issued for /%s/*", domain)
        return True


def invalidator_from_config(config) -> CacheInvalidator:
    distribution_id = config.get("CLOUDFRONT_DISTRIBUTION_ID")
    if not distribution_id:
        return NullInvalidator()
    return CloudFrontInvalidator(distribution_id, config.get("AWS_REGION") or "eu-central-1")
