"""Test helpers: a routed fake of the SportsBuddy REST server and payload builders."""

from typing import Any, Callable, Dict, List, Tuple, Union

import httpx

BASE_URL = "http://sportsbuddy.test/api"
API_PREFIX = "/api"
VIEWER_ID = "u-viewer"

Route = Union[Tuple[int, Any], Callable[[httpx.Request], Any]]


def envelope(data: Any = None, **extra) -> Dict[str, Any]:
    return {"success": True, "data": data, **extra}


def athlete(athlete_id: str, **fields) -> Dict[str, Any]:
    return {"_id": athlete_id, "name": f"Athlete {athlete_id}", "followers": [], "followersCount": 0, **fields}


def post(post_id: str, **fields) -> Dict[str, Any]:
    return {"_id": post_id, "content": f"Post {post_id}", "likesCount": 0, "isLiked": False, **fields}


def entry(rank: int, points: int = None) -> Dict[str, Any]:
    return {
        "user": {"_id": f"u{rank}", "name": f"Runner {rank}"},
        "points": points if points is not None else 10000 - rank * 10,
        "rank": rank,
        "category": "overall",
        "level": {"current": 1, "experience": 0, "nextLevelExp": 100},
    }


class FakeServer:
    """(METHOD, path) -> (status, json) or a handler returning an httpx.Response (sync or async)"""

    def __init__(self):
        self.routes: Dict[Tuple[str, str], Route] = {}
        self.requests: List[httpx.Request] = []

    def add(self, method: str, path: str, json: Any = None, status: int = 200) -> None:
        self.routes[(method, path)] = (status, json)

    def handle(self, method: str, path: str, handler: Callable[[httpx.Request], Any]) -> None:
        self.routes[(method, path)] = handler

    def calls(self, method: str = None, path: str = None) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if (method is None or r.method == method) and (path is None or self.path_of(r) == path)
        ]

    @staticmethod
    def path_of(request: httpx.Request) -> str:
        path = request.url.path
        return path[len(API_PREFIX):] if path.startswith(API_PREFIX) else path

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        route = self.routes.get((request.method, self.path_of(request)))
        if route is None:
            return httpx.Response(404, json={"success": False, "message": f"No route {request.url.path}"})
        if callable(route):
            return route(request)
        status, body = route
        return httpx.Response(status, json=body)
