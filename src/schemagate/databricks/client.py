import logging
from typing import Any, Optional

from databricks.connect import DatabricksSession
from pyspark.sql import SparkSession

logger = logging.getLogger(__name__)


class DatabricksClient:
    """Read-only SQL access through databricks-connect, used for introspection.

    Compute selection and credentials come from Databricks SDK configuration
    (env vars, ~/.databrickscfg profiles). An explicit host/token or profile
    overrides it.
    """

    def __init__(
        self,
        host: Optional[str] = None,
        token: Optional[str] = None,
        profile: Optional[str] = None,
    ) -> None:
        self._host = host
        self._token = token
        self._profile = profile
        self._session: SparkSession | None = None

    @property
    def connected(self) -> bool:
        return self._session is not None

    def connect(self) -> None:
        """Establish a DatabricksSession. Must be called before fetchall."""
        if self._session is not None:
            raise RuntimeError("Already connected. Call close() before reconnecting.")

        builder = DatabricksSession.builder

        if self._profile:
            builder = builder.profile(self._profile)
        if self._host:
            builder = builder.host(self._host)
        if self._token:
            builder = builder.token(self._token)

        self._session = builder.getOrCreate()
        logger.debug("Connected to Databricks")

    def fetchall(self, sql_statement: str) -> list[dict[str, Any]]:
        if self._session is None:
            raise RuntimeError("Not connected. Call connect() first.")
        rows = self._session.sql(sql_statement).collect()
        return [row.asDict() for row in rows]

    def close(self) -> None:
        if self._session is not None:
            try:
                self._session.stop()
            finally:
                self._session = None

    def __enter__(self) -> "DatabricksClient":
        self.connect()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()
