import os
import logging
from contextlib import asynccontextmanager
from typing import Optional, Any

from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

from shiptivity.client_service import ClientService
from shiptivity.db_connection import DbConnection
from shiptivity.errors import CorruptRecordError, ShiptivityError

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
)

logger = logging.getLogger("shiptivity_backend")


class ClientUpdate(BaseModel):
    # raw values, validated by the reordering engine
    status: Optional[Any] = None
    priority: Optional[Any] = None


def get_service(request: Request) -> ClientService:
    return request.app.state.client_service


def create_app(connection: Optional[DbConnection] = None) -> FastAPI:
    connection = connection or DbConnection()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        connection.create_schema()
        try:
            yield
        finally:
            # replaces closing the connection on SIGINT / SIGTERM
            connection.dispose()

    app = FastAPI(title="Shiptivity API", lifespan=lifespan)
    app.state.client_service = ClientService(connection)

    # CORS configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Allow all origins for dev
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ShiptivityError)
    async def _invalid_input(request: Request, exc: ShiptivityError):
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.get("/")
    def root():
        return {"message": "SHIPTIVITY API. Read documentation to see API docs"}

    @app.get("/api/v1/clients")
    def list_clients(status: Optional[str] = None, service: ClientService = Depends(get_service)):
        """List all clients, optionally only one swimlane: backlog | in-progress | complete."""
        try:
            return service.list_clients(status or None)
        except (SQLAlchemyError, CorruptRecordError) as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.get("/api/v1/clients/{client_id}")
    def get_client(client_id: str, service: ClientService = Depends(get_service)):
        try:
            return service.get_client(client_id)
        except (SQLAlchemyError, CorruptRecordError) as e:
            raise HTTPException(status_code=500, detail=str(e))

    @app.put("/api/v1/clients/{client_id}")
    def update_client(client_id: str, update: Optional[ClientUpdate] = None,
                      service: ClientService = Depends(get_service)):
        """
        Change the status and/or priority of a client.

        Priority 1 is the top of the swimlane; the other clients of the
        affected swimlanes are re-ranked so no two share a priority.
        Returns the full client list.
        """
        update = update or ClientUpdate()
        try:
            return service.move_client(client_id, status=update.status, priority=update.priority)
        except (SQLAlchemyError, CorruptRecordError) as e:
            raise HTTPException(status_code=500, detail=str(e))

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=os.getenv("API_HOST", "0.0.0.0"), port=int(os.getenv("API_PORT", "3001")))
