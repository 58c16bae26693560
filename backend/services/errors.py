"""
Service-level errors.

Les services lèvent ces exceptions ; la couche HTTP les traduit en
réponses JSON (voir backend.app.main).
"""
from __future__ import annotations


class ServiceError(Exception):
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ServiceError):
    http_status = 400


class AuthenticationError(ServiceError):
    http_status = 401


class NotFound(ServiceError):
    http_status = 404


class Conflict(ServiceError):
    http_status = 409


class StorageError(ServiceError):
    http_status = 500
