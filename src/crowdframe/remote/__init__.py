"""Remote service access."""

from crowdframe.remote.client import Boto3RemoteClient, RemoteClient, classify_error

__all__ = ["Boto3RemoteClient", "RemoteClient", "classify_error"]
