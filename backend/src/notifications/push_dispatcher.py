"""
Theme Park Wait Watch - Push Dispatcher
Delivers push notifications through Firebase Cloud Messaging.
"""

import threading
from typing import Dict, Optional

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError
from google.auth.exceptions import GoogleAuthError

from utils.config import FIREBASE_CREDENTIALS_PATH
from utils.logger import logger


class DispatchError(Exception):
    """Raised when a push notification cannot be handed to FCM."""
    pass


class FirebasePushDispatcher:
    """
    Sends one notification per call via firebase_admin.messaging.

    The Firebase app is initialised on first send, from a service-account
    file when FIREBASE_CREDENTIALS_PATH is set and from application default
    credentials otherwise.
    """

    APP_NAME = 'waitwatch'

    def __init__(self, credentials_path: str = FIREBASE_CREDENTIALS_PATH):
        self.credentials_path = credentials_path
        self._app: Optional[firebase_admin.App] = None
        self._init_lock = threading.Lock()

    def _get_app(self) -> firebase_admin.App:
        """
        Get or initialise the Firebase app.

        Raises:
            DispatchError: If credentials cannot be loaded (missing or
                malformed service-account file, no default credentials)
        """
        with self._init_lock:
            if self._app is None:
                try:
                    self._app = firebase_admin.get_app(self.APP_NAME)
                except ValueError:
                    self._app = self._initialize_app()
            return self._app

    def _initialize_app(self) -> firebase_admin.App:
        source = "service_account" if self.credentials_path else "application_default"
        try:
            if self.credentials_path:
                cred = credentials.Certificate(self.credentials_path)
            else:
                cred = credentials.ApplicationDefault()
            app = firebase_admin.initialize_app(cred, name=self.APP_NAME)
        except (OSError, ValueError, GoogleAuthError) as e:
            logger.error("Firebase app initialization failed", extra={
                "credentials": source,
                "error": str(e)
            })
            raise DispatchError(f"Firebase initialization failed ({source}): {e}") from e

        logger.info("Firebase app initialized", extra={"credentials": source})
        return app

    def send(self, token: str, title: str, body: str, data: Dict[str, str]) -> str:
        """
        Send a push notification to one device.

        Args:
            token: FCM device registration token
            title: Notification title
            body: Notification body
            data: Data payload (string keys and values)

        Returns:
            FCM message ID

        Raises:
            DispatchError: If Firebase rejects the message, cannot be reached
                or its credentials cannot be loaded
        """
        message = messaging.Message(
            notification=messaging.Notification(title=title, body=body),
            data={str(k): str(v) for k, v in data.items()},
            token=token,
        )

        app = self._get_app()
        try:
            message_id = messaging.send(message, app=app)
        except (FirebaseError, ValueError) as e:
            raise DispatchError(f"FCM send failed: {e}") from e

        logger.debug(f"Push sent: {message_id}")
        return message_id


# Singleton instance
_dispatcher: Optional[FirebasePushDispatcher] = None


def get_push_dispatcher() -> FirebasePushDispatcher:
    """Get or create the singleton Firebase dispatcher."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = FirebasePushDispatcher()
    return _dispatcher
