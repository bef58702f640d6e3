"""Test doubles for remote sites and other HTTP collaborators."""

import json

import httpx

SITE_INFO_PATH = "/api/v1/public/site-info"
FOLLOW_FROM_PATH = "/api/v1/follows/follow-from"
UNFOLLOW_FROM_PATH = "/api/v1/follows/unfollow-from"


class FakeRemoteSite:
    """
    Stands in for every outbound HTTP endpoint.

    Remote sites answer site-info and follow notifications. Any path listed
    in ``failing_paths`` answers 500, and ``unreachable`` makes every
    request fail at the transport level.
    """

    def __init__(self, site_id=7, name="Remote Notes", image="/avatar.png"):
        self.site_id = site_id
        self.name = name
        self.image = image
        self.failing_paths = set()
        self.unreachable = False
        self.requests = []
        self.ai_note_ids = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.unreachable:
            raise httpx.ConnectError("connection refused", request=request)

        path = request.url.path
        if path in self.failing_paths:
            return httpx.Response(500, json={"error": "boom"})
        if path == SITE_INFO_PATH:
            return httpx.Response(200, json={"id": self.site_id, "name": self.name, "image": self.image})
        if path in (FOLLOW_FROM_PATH, UNFOLLOW_FROM_PATH):
            return httpx.Response(200, json={"success": True})
        if path == "/enhance-query":
            return httpx.Response(200, json={"noteIds": self.ai_note_ids})
        if path == "/hooks":
            return httpx.Response(204)
        return httpx.Response(404)

    def posted(self, path):
        """JSON bodies POSTed to ``path``, in order."""
        return [
            json.loads(r.content)
            for r in self.requests
            if r.method == "POST" and r.url.path == path
        ]

    def calls(self, path):
        return [r for r in self.requests if r.url.path == path]
