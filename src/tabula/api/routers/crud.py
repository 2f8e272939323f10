# src/tabula/api/routers/crud.py
from typing import Any, Dict, List, Optional, Type

from fastapi import APIRouter, Request
from fastapi.responses import RedirectResponse
from starlette.concurrency import run_in_threadpool

from ...core.config import TableConfig
from ...core.logging import color_palette, log
from ...core.query.params import RawValue
from ...db.client import DbClient
from ...model import TableModel
from ...render import ListPayload, Presenter, RowPayload

FORM_METHODS = {"POST", "PUT", "PATCH"}


async def request_params(request: Request) -> Dict[str, RawValue]:
    """
    Query string and form body merged into one key -> value(s) mapping.

    Keys that repeat, or end in `[]`, map to a list of strings.
    """
    items = list(request.query_params.multi_items())
    if request.method in FORM_METHODS:
        form = await request.form()
        items.extend((key, value) for key, value in form.multi_items() if isinstance(value, str))

    collected: Dict[str, List[str]] = {}
    forced = set()
    for key, value in items:
        if key.endswith("[]"):
            key = key[:-2]
            forced.add(key)
        collected.setdefault(key, []).append(value)

    return {
        key: values if key in forced or len(values) > 1 else values[0]
        for key, values in collected.items()
    }


class CrudRouter:
    """Registers list, detail and write routes for one table model."""

    def __init__(
        self,
        model_class: Type[TableModel],
        config: TableConfig,
        db_client: DbClient,
        router: APIRouter,
        presenter: Optional[Presenter] = None,
    ):
        self.model_class = model_class
        self.config = config
        self.db_client = db_client
        self.router = router
        self.presenter = presenter
        self.namespace = model_class.namespace_for(config)

    def model(self, params: Dict[str, RawValue]) -> TableModel:
        """A fresh model for one request."""
        return self.model_class(self.config, self.db_client, params, self.presenter)

    def generate_routes(self) -> None:
        self._add_list_routes()
        self._add_row_routes()
        log.success(f"Generated routes for {color_palette['table'](self.namespace)}")

    def _add_list_routes(self) -> None:
        path = f"/{self.namespace}"

        @self.router.get(path, response_model=ListPayload, summary=f"List {self.namespace} rows")
        async def list_rows(request: Request) -> Any:
            model = self.model(await request_params(request))
            return await run_in_threadpool(model.rows)

        @self.router.post(f"{path}/rows", summary=f"Apply a list action to {self.namespace}")
        async def update_rows(request: Request) -> RedirectResponse:
            model = self.model(await request_params(request))
            target = await run_in_threadpool(model.rows_update)
            return RedirectResponse(target, status_code=303)

    def _add_row_routes(self) -> None:
        path = f"/{self.namespace}/row"

        @self.router.get(path, response_model=RowPayload, summary=f"Empty {self.namespace} form")
        async def new_row(request: Request) -> Any:
            model = self.model(await request_params(request))
            return await run_in_threadpool(model.row)

        @self.router.get(f"{path}/{{key_value}}", response_model=RowPayload, summary=f"Read one {self.namespace} row")
        async def read_row(key_value: str, request: Request) -> Any:
            model = self.model(await request_params(request))
            return await run_in_threadpool(model.row, key_value)

        @self.router.post(path, summary=f"Create or update one {self.namespace} row")
        async def write_row(request: Request) -> RedirectResponse:
            model = self.model(await request_params(request))
            target = await run_in_threadpool(model.row_update)
            return RedirectResponse(target, status_code=303)
