"""Bodima booking core.

Client-side reservation and payment orchestration for the Bodima rental
marketplace: draft handling, validation, and the reservation/payment saga
over the remote reservation and payment APIs.
"""

__version__ = "0.1.0"
