"""Endpoints of the sample shop application."""

import json

from starlette.requests import Request
from starlette.responses import JSONResponse, PlainTextResponse


class WidgetsResource:
    async def list(self, request: Request) -> JSONResponse:
        return JSONResponse({"widgets": []})

    async def show(self, request: Request) -> JSONResponse:
        return JSONResponse({"id": request.path_params["id"]})

    async def new(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse("new widget form")

    async def create(self, request: Request) -> JSONResponse:
        body = await request.body()
        payload = json.loads(body) if body else {}
        return JSONResponse({"created": payload}, status_code=201)

    async def edit(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse("edit widget form")

    async def update(self, request: Request) -> JSONResponse:
        return JSONResponse({"updated": request.path_params["id"]})

    async def destroy(self, request: Request) -> JSONResponse:
        return JSONResponse({"deleted": request.path_params["id"]})


class OrdersResource:
    async def list(self, request: Request) -> JSONResponse:
        return JSONResponse({"orders": []})


class Reports:
    async def export(self, request: Request) -> PlainTextResponse:
        return PlainTextResponse("report.csv")


async def home(request: Request) -> PlainTextResponse:
    return PlainTextResponse("home")


async def health(request: Request) -> PlainTextResponse:
    return PlainTextResponse("ok")


async def broken(request: Request) -> PlainTextResponse:
    raise ValueError("handler exploded")
