# shiptivity/db_connection.py
import logging
import os
import threading
from contextlib import contextmanager
from typing import Callable, Iterator, Optional

from dotenv import load_dotenv
from google.auth import default as google_auth_default
from google.cloud import secretmanager
from google.oauth2 import service_account
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from shiptivity.entities import Base

load_dotenv()

logger = logging.getLogger("shiptivity_backend")


class DbConnection:
    """
    Explicit handle on the client database.

    One instance owns one engine (and its pool). Request code gets a fresh
    Session per unit of work from session_factory() / session_scope().
    """

    def __init__(self, database_url: Optional[str] = None) -> None:
        # ---- env config ----
        self.PROJECT_ID   = os.getenv("GOOGLE_CLOUD_PROJECT", "")
        self.DB_HOST      = os.getenv("DB_HOST", "")
        self.DB_PORT      = int(os.getenv("DB_PORT", "5432"))
        self.DB_NAME      = os.getenv("DB_NAME", "")
        self.DB_USER      = os.getenv("DB_USER", "")
        self.DB_PASSWORD  = os.getenv("DB_PASSWORD", "")
        self.DB_SECRET_ID = os.getenv("DB_SECRET_ID", "")
        self.SQLITE_PATH  = os.getenv("SQLITE_PATH", "./clients.db")

        # !###############################################
        # !   EXPLICIT URL > DATABASE_URL > POSTGRES HOST
        # !   > LOCAL SQLITE FILE
        # !###############################################
        self.DATABASE_URL = database_url or os.getenv("DATABASE_URL", "")
        self.IS_LOCAL = True
        if not self.DATABASE_URL:
            if self.DB_HOST:
                self.IS_LOCAL = False
                self.DATABASE_URL = (
                    f"postgresql+pg8000://{self.DB_USER}:{self._get_db_password_lazy()}"
                    f"@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"
                )
            else:
                self.DATABASE_URL = f"sqlite:///{self.SQLITE_PATH}"

        self._engine: Optional[Engine] = None
        self._sessionmaker: Optional[sessionmaker] = None
        self._lock = threading.RLock()

    # -------- GCP auth / creds --------
    def _build_creds(self):
        key_path = os.environ.get("GOOGLE_APPLICATION_CREDENTIALS")
        scopes = ["https://www.googleapis.com/auth/cloud-platform"]
        if key_path and os.path.exists(key_path):
            return service_account.Credentials.from_service_account_file(key_path, scopes=scopes)
        creds, _ = google_auth_default(scopes=scopes)
        return creds

    # -------- DB password (Secret Manager) --------
    def _get_db_password_lazy(self) -> str:
        if self.DB_PASSWORD:
            return self.DB_PASSWORD
        if self.DB_SECRET_ID:
            client = secretmanager.SecretManagerServiceClient(credentials=self._build_creds())
            name = client.secret_version_path(self.PROJECT_ID, self.DB_SECRET_ID, "latest")
            resp = client.access_secret_version(request={"name": name})
            self.DB_PASSWORD = resp.payload.data.decode("utf-8")
            return self.DB_PASSWORD
        raise RuntimeError("No DB_PASSWORD and no Secret Manager configured")

    # -------- Engine --------
    @property
    def engine(self) -> Engine:
        with self._lock:
            if self._engine is None:
                url = make_url(self.DATABASE_URL)
                logger.info(f"[DB] Connecting to {url.render_as_string(hide_password=True)}")
                if url.get_backend_name() == "sqlite":
                    # FastAPI serves sync routes from a thread pool
                    self._engine = create_engine(
                        url,
                        future=True,
                        connect_args={"check_same_thread": False},
                    )
                else:
                    connect_args = {}
                    if url.get_driver_name() == "pg8000":
                        connect_args["timeout"] = 10  # fail in 10s instead of hanging forever
                    self._engine = create_engine(
                        url,
                        future=True,
                        pool_pre_ping=True,
                        connect_args=connect_args,
                    )
            return self._engine

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)

    def dispose(self) -> None:
        with self._lock:
            if self._engine is not None:
                self._engine.dispose()
                self._engine = None
                self._sessionmaker = None

    # -------- SQLAlchemy Session factory --------
    def session_factory(self) -> Callable[[], Session]:
        with self._lock:
            if self._sessionmaker is None:
                self._sessionmaker = sessionmaker(
                    bind=self.engine,
                    autoflush=False,
                    autocommit=False,
                    expire_on_commit=False,
                    future=True,
                )
            maker = self._sessionmaker

        def _factory() -> Session:
            return maker()

        return _factory

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """One transaction: commit on success, rollback on any error."""
        session = self.session_factory()()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()
