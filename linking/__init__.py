"""Kalshi credential linking."""

from linking.predicate import is_verification_success, verification_payload
from linking.linker import CredentialLinker, LinkState, LinkMessage
from linking.account import KalshiAccount
