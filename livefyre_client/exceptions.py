# SPDX-License-Identifier: Apache-2.0
# Copyright (c) 2025 Eul Bite

"""
Exception hierarchy for the Livefyre SDK.

- InvalidArgumentError: bad input, raised before any token is signed or any
  request is sent
- TokenError: a token could not be signed or decoded
- RemoteServiceError: Livefyre answered with an unexpected status code
"""


class LivefyreError(Exception):
    """Base class for all SDK errors."""


class InvalidArgumentError(LivefyreError, ValueError):
    """An argument failed validation."""


class TokenError(LivefyreError):
    """Signing or decoding a token failed."""


class RemoteServiceError(LivefyreError):
    """
    Unexpected HTTP status from a Livefyre endpoint.

    Attributes:
        status: HTTP status code returned by the service
        body: Raw response body (decoded as UTF-8, lossy)
    """

    def __init__(self, message: str, status: int, body: str = ""):
        super().__init__(f"{message} Status code: {status}")
        self.status = status
        self.body = body
