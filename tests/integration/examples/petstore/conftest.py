import contextlib
import time
from http import HTTPStatus

from flask import Response, make_response, request
from http_server_mock import HttpServerMock

app = HttpServerMock(__name__)
_server = contextlib.ExitStack()


@app.get("/v1/pets/<int:pet_id>")
def get_pet(pet_id):
    if pet_id != 1:
        return {"error": "not found"}, HTTPStatus.NOT_FOUND
    return {"id": 1, "name": "rex", "tag": "dog"}, HTTPStatus.OK


@app.post("/v1/pets")
def create_pet():
    if request.headers.get("Authorization") != "Bearer secret":
        return {"error": "unauthorized"}, HTTPStatus.UNAUTHORIZED
    return {"id": 2, "name": request.get_json()["name"]}, HTTPStatus.CREATED


@app.post("/v1/echo")
def echo_body():
    data = request.get_data(as_text=True)
    if not data:
        return "", HTTPStatus.NO_CONTENT
    return {}, HTTPStatus.OK, {"X-Echo-Body": data, "X-Echo-Type": request.content_type or ""}


@app.get("/v1/search")
def search():
    return {}, HTTPStatus.OK, {"X-Echo-Query": request.query_string.decode()}


@app.get("/v1/limits")
def limits():
    return {}, HTTPStatus.OK, {"X-Rate-Limit": "100"}


@app.get("/v1/session")
def session():
    response = make_response({}, HTTPStatus.OK)
    response.headers["X-Echo-Cookie"] = request.headers.get("Cookie", "")
    response.set_cookie("theme", "dark", path="/")
    return response


@app.get("/v1/broken")
def broken():
    return {"id": "one"}, HTTPStatus.OK


@app.get("/v1/slow")
def slow():
    time.sleep(2)
    return {}, HTTPStatus.OK


@app.get("/v1/drip")
def drip():
    def chunks():
        for _ in range(8):
            time.sleep(0.3)
            yield " "

    return Response(chunks(), mimetype="application/json")


def pytest_sessionstart(session):
    _server.enter_context(app.run("localhost", 5000))


def pytest_sessionfinish(session, exitstatus):
    _server.close()
