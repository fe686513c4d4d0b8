"""
Session store for persisting the logged in session.
Handles token persistence to disk between runs.
"""
import json
from pathlib import Path
from typing import Optional

from .session import Session
from ..utils import setup_logger


logger = setup_logger(__name__)


class SessionStore:
    """
    Manages session storage and retrieval.

    Stores the session (user profile, tokens and expiry timestamp) in a JSON
    file. Point it at the user's data directory.
    """

    def __init__(self, storage_path: Path):
        """
        Initialize session store.

        Args:
            storage_path: Path to session storage file
        """
        self.storage_path = Path(storage_path)

        # Ensure parent directory exists
        self.storage_path.parent.mkdir(parents=True, exist_ok=True)

    def save(self, session: Session) -> None:
        """
        Save session to storage.

        Args:
            session: Session to persist
        """
        try:
            with open(self.storage_path, 'w') as f:
                json.dump(session.to_dict(), f, indent=2)

            logger.debug(f"Session saved to {self.storage_path}")
        except OSError as e:
            logger.error(f"Failed to save session: {e}")
            raise

    def load(self) -> Optional[Session]:
        """
        Load session from storage.

        Returns:
            Stored session or None if missing or unreadable
        """
        if not self.storage_path.exists():
            logger.debug("No stored session found")
            return None

        try:
            with open(self.storage_path, 'r') as f:
                session = Session.from_dict(json.load(f))

            logger.debug("Session loaded from storage")
            return session
        except (OSError, ValueError, KeyError, TypeError) as e:
            logger.warning(f"Failed to load session: {e}")
            return None

    def clear(self) -> None:
        """Delete stored session."""
        if self.storage_path.exists():
            self.storage_path.unlink()
            logger.info("Stored session cleared")
