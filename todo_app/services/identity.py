"""Identity provider - session d'authentification explicite"""

import logging
from typing import Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from todo_app.core.errors import AuthenticationFailure
from todo_app.core.security import decode_token
from todo_app.models.user import User

logger = logging.getLogger(__name__)

AuthListener = Callable[[Optional[str]], None]


class AuthSession:
    """
    Porte l'utilisateur connecté (uid ou None) et prévient les
    abonnés à chaque changement d'identité.

    Passée au TaskRepository à la construction : pas d'utilisateur
    courant global.
    """

    def __init__(self, db: Session):
        self.db = db
        self._user_id: Optional[str] = None
        self._listeners: List[AuthListener] = []

    @property
    def current_user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def current_user(self) -> Optional[User]:
        if self._user_id is None:
            return None
        return self.db.query(User).filter(User.id == self._user_id).first()

    def sign_up(self, email: str, password: str) -> str:
        """Créer le compte puis connecter l'utilisateur"""
        if self.db.query(User).filter(User.email == email).first():
            raise AuthenticationFailure("Email déjà utilisé")

        user = User(email=email)
        user.set_password(password)
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise AuthenticationFailure("Email déjà utilisé")
        self.db.refresh(user)

        logger.info(f"Account created uid={user.id}")
        self._set_user(user.id)
        return user.id

    def sign_in(self, email: str, password: str) -> str:
        user = self.db.query(User).filter(User.email == email).first()
        # même message pour un email inconnu et un mauvais mot de passe
        if not user or not user.verify_password(password):
            logger.info(f"Sign-in refused for {email}")
            raise AuthenticationFailure("Email ou mot de passe incorrect")

        self._set_user(user.id)
        return user.id

    def sign_out(self) -> None:
        self._set_user(None)

    def restore(self, token: str) -> Optional[str]:
        """Retrouver l'identité depuis un token d'accès (requêtes HTTP sans état)"""
        user_id = decode_token(token)
        if user_id and self.db.query(User).filter(User.id == user_id).first():
            self._set_user(user_id)
        else:
            self._set_user(None)
        return self._user_id

    def on_auth_state_change(self, callback: AuthListener) -> Callable[[], None]:
        """Abonner un callback ; retourne la fonction de désabonnement"""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def initial_route(self) -> str:
        # écran de départ : la liste si connecté, sinon le login
        return "todos" if self._user_id else "login"

    def _set_user(self, user_id: Optional[str]) -> None:
        if user_id == self._user_id:
            return
        self._user_id = user_id
        for listener in list(self._listeners):
            listener(user_id)
