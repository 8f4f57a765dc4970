"""CloudWatch client wrapper."""

from __future__ import annotations

from typing import Any, Dict, Iterator, List

import boto3
from botocore.config import Config


class CloudWatchClient:
    def __init__(
        self,
        region: str,
        profile: str | None = None,
        max_pool_connections: int = 10,
    ):
        # boto3 clients are thread-safe, sessions are not: build the session
        # once here and share only the client across worker threads.
        session = boto3.session.Session(profile_name=profile, region_name=region)
        self.client = session.client(
            "cloudwatch",
            config=Config(max_pool_connections=max_pool_connections),
        )

    def iter_metric_pages(self) -> Iterator[List[Dict[str, Any]]]:
        """Yield the raw ``Metrics`` list of every ListMetrics page, unfiltered."""
        paginator = self.client.get_paginator("list_metrics")
        for page in paginator.paginate():
            yield page.get("Metrics", [])

    def get_metric_statistics(self, **params: Any) -> Dict[str, Any]:
        return self.client.get_metric_statistics(**params)
