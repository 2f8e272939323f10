# src/tabula/app.py
"""FastAPI application wiring for table models."""

from typing import Dict, Optional, Type

from fastapi import APIRouter, FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tabula.api.routers.crud import CrudRouter
from tabula.core.config import Settings, TableConfig
from tabula.core.errors import QueryError, SchemaError
from tabula.core.logging import color_palette, escape, log
from tabula.db.client import DbClient, DbConfig
from tabula.model import TableModel
from tabula.render import Presenter


def _error_body(status_code: int, message: str, **extra) -> dict:
    return {"error": True, "message": message, "status_code": status_code, **extra}


class TabulaApp:
    """Serves one route group per registered table model."""

    def __init__(
        self,
        settings: Settings,
        app: Optional[FastAPI] = None,
        db_client: Optional[DbClient] = None,
        prefix: str = "",
    ):
        self.settings = settings
        self.app = app or FastAPI()
        self.db_client = db_client or DbClient(DbConfig.from_settings(settings))
        self.router = APIRouter(prefix=prefix)
        self.prefix = prefix
        self.tables: Dict[str, CrudRouter] = {}
        log.set_level(settings.log_level)
        self._initialize_app()
        self.configure_error_handlers()

    def _initialize_app(self) -> None:
        self.app.title = self.settings.project_name
        self.app.version = self.settings.version
        self.app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def register(
        self,
        model_class: Type[TableModel] = TableModel,
        presenter: Optional[Presenter] = None,
        **config,
    ) -> CrudRouter:
        """Register CRUD routes for `model_class`; keyword arguments override TableConfig fields."""
        config.setdefault("base_path", self.prefix)
        table_config = TableConfig.from_settings(self.settings, **config)
        crud = CrudRouter(model_class, table_config, self.db_client, self.router, presenter)
        crud.generate_routes()
        self.tables[crud.namespace] = crud
        return crud

    def mount(self) -> FastAPI:
        """Attach the generated routes; call once after every register()."""
        log.section("Mounting Table Routes")
        self.print_welcome()
        self.app.include_router(self.router)
        log.success(f"Mounted routes for {len(self.tables)} table(s)")
        with log.indented():
            for namespace in self.tables:
                log.info(f"{color_palette['table'](namespace)} at {escape(f'{self.prefix}/{namespace}')}")
        return self.app

    def configure_error_handlers(self) -> None:
        @self.app.exception_handler(HTTPException)
        async def http_exception_handler(request: Request, exc: HTTPException):
            return JSONResponse(status_code=exc.status_code, content=_error_body(exc.status_code, exc.detail))

        @self.app.exception_handler(SchemaError)
        async def schema_error_handler(request: Request, exc: SchemaError):
            log.error(f"Schema error on {color_palette['table'](exc.table)}: {escape(str(exc.cause))}")
            return JSONResponse(
                status_code=500,
                content=_error_body(500, "Table schema unavailable", table=exc.table),
            )

        @self.app.exception_handler(QueryError)
        async def query_error_handler(request: Request, exc: QueryError):
            return JSONResponse(
                status_code=400,
                content=_error_body(
                    400,
                    f"{exc.operation.capitalize()} failed",
                    detail=str(exc.cause) if self.settings.debug else None,
                ),
            )

    def print_welcome(self) -> None:
        """Check the database connection and announce the application."""
        self.db_client.test_connection()
        log.info(f"{self.settings.project_name} initialized (version {self.settings.version})")
