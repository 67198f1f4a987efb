"""Erreurs métier partagées par le store, l'identité et le repository."""


class StoreError(Exception):
    """Le document store a refusé l'opération (réseau, base, ...)"""


class DocumentNotFound(StoreError):
    """Document absent, ou qui n'appartient pas à l'utilisateur courant"""

    def __init__(self, collection: str, record_id: str):
        super().__init__(f"{collection}/{record_id} introuvable")
        self.collection = collection
        self.record_id = record_id


class AuthenticationFailure(Exception):
    """Identifiants refusés à la connexion ou à l'inscription"""
