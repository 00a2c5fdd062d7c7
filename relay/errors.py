# relay/errors.py
"""
Erros de domínio do relay.

Cada erro carrega o status HTTP que os blueprints devolvem ao chamador:
- ValidationError  -> 400 (campo ausente / formato inválido)
- NotFoundError    -> 404 (tenant ou app GupShup inexistente)
- UpstreamError    -> 500 (falha/timeout da GupShup, status != submitted)
"""

from __future__ import annotations


class RelayError(Exception):
    status_code = 500

    def __init__(self, message: str, *, details: str | None = None):
        super().__init__(message)
        self.message = message
        self.details = details


class ValidationError(RelayError):
    status_code = 400


class NotFoundError(RelayError):
    status_code = 404


class UpstreamError(RelayError):
    status_code = 500
