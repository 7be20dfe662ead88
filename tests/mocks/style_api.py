import json
import typing as t
from email.parser import BytesParser
from email.policy import default

import httpx

from markup_toolkit.config import Config

STYLE_ENDPOINTS = ("/v1/style/checks", "/v1/style/suggestions", "/v1/style/rewrites")
STYLE_GUIDES_ENDPOINT = "/v1/style-guides"
TEST_PLATFORM_URL = "https://platform.test"


class FakeStyleAPI:
    """
    Emulate the subset of style endpoints used in tests.

    Parameters
    ----------
    polls_before_completion : int, optional
        Number of ``running`` answers before a workflow completes.
    failing_contents : set[str] | None, optional
        Document contents whose workflow ends with status ``failed``.
    """

    def __init__(
        self,
        *,
        polls_before_completion: int = 1,
        failing_contents: set[str] | None = None,
    ) -> None:
        self._polls_before_completion = polls_before_completion
        self._failing_contents = failing_contents or set()
        self._workflows: dict[str, dict[str, t.Any]] = {}
        self._counter = 0
        self.submissions: list[dict[str, t.Any]] = []
        self.requests: list[httpx.Request] = []
        self.style_guides: dict[str, dict[str, t.Any]] = {}

    def _json_response(self, *, status_code: int, payload: dict[str, t.Any]) -> httpx.Response:
        return httpx.Response(status_code=status_code, json=payload)

    def _next_id(self) -> str:
        self._counter += 1
        return f"workflow_{self._counter}"

    def _parse_multipart(self, *, request: httpx.Request) -> dict[str, t.Any]:
        """
        Parse a multipart form into ``{field: value}``.

        Parameters
        ----------
        request : httpx.Request
            Incoming HTTP request.

        Returns
        -------
        dict[str, typing.Any]
            Text fields as ``str``; the ``file_upload`` part as a dict with
            ``filename``, ``content_type`` and raw ``content``.
        """
        content_type = request.headers.get("content-type", "")
        body = request.read()
        message = BytesParser(policy=default).parsebytes(
            text=b"Content-Type: " + content_type.encode("utf-8") + b"\r\n\r\n" + body
        )
        fields: dict[str, t.Any] = {}
        for part in message.iter_parts():
            name = part.get_param("name", header="content-disposition")
            payload = part.get_payload(decode=True) or b""
            if name == "file_upload":
                fields[name] = {
                    "filename": part.get_filename(),
                    "content_type": part.get_content_type(),
                    "content": payload,
                }
            else:
                fields[name] = payload.decode("utf-8")
        return fields

    def _completed_payload(self, *, workflow_id: str, endpoint: str) -> dict[str, t.Any]:
        workflow_type = endpoint.rsplit("/", 1)[-1]
        issue: dict[str, t.Any] = {
            "original": "This is a test sentence.",
            "position": {"start_index": 0},
            "subcategory": "passive_voice",
            "category": "grammar",
        }
        if workflow_type != "checks":
            issue["suggestion"] = "This sentence should be rewritten."
        payload: dict[str, t.Any] = {
            "workflow": {
                "id": workflow_id,
                "type": workflow_type,
                "api_version": "1.0.0",
                "generated_at": "2025-01-15T14:22:33Z",
                "status": "completed",
            },
            "config": {
                "dialect": "american_english",
                "style_guide": {"style_guide_type": "ap", "style_guide_id": "sg-1"},
                "tone": "academic",
            },
            "original": {
                "issues": [issue],
                "scores": {"quality": {"score": 80, "grammar": {"score": 90, "issues": 1}}},
            },
        }
        if workflow_type == "rewrites":
            payload["rewrite"] = {"text": "The sentence was rewritten.", "issues": []}
        return payload

    def _handle_submit(self, *, request: httpx.Request, endpoint: str) -> httpx.Response:
        fields = self._parse_multipart(request=request)
        self.submissions.append(fields)
        content = fields["file_upload"]["content"].decode("utf-8", errors="replace")
        if not content.strip():
            return self._json_response(
                status_code=422,
                payload={
                    "detail": [
                        {
                            "loc": ["body", "file_upload"],
                            "msg": "content must not be empty",
                            "type": "value_error",
                        }
                    ]
                },
            )
        workflow_id = self._next_id()
        self._workflows[workflow_id] = {
            "endpoint": endpoint,
            "polls_left": self._polls_before_completion,
            "failing": content in self._failing_contents,
        }
        return self._json_response(
            status_code=200,
            payload={
                "workflow_id": workflow_id,
                "status": "running",
                "message": "Style workflow started successfully.",
            },
        )

    def _handle_poll(self, *, workflow_id: str, endpoint: str) -> httpx.Response:
        workflow = self._workflows.get(workflow_id)
        if workflow is None:
            return self._json_response(
                status_code=404,
                payload={
                    "error": {
                        "code": "workflowNotFound",
                        "message": "Workflow not found",
                        "description": f"Workflow {workflow_id} does not exist",
                    }
                },
            )
        if workflow["polls_left"] > 0:
            workflow["polls_left"] -= 1
            return self._json_response(
                status_code=200, payload={"workflow_id": workflow_id, "status": "running"}
            )
        if workflow["failing"]:
            return self._json_response(
                status_code=200, payload={"workflow_id": workflow_id, "status": "failed"}
            )
        return self._json_response(
            status_code=200,
            payload=self._completed_payload(workflow_id=workflow_id, endpoint=endpoint),
        )

    def _handle_style_guides(self, *, request: httpx.Request, path: str) -> httpx.Response:
        style_guide_id = path[len(STYLE_GUIDES_ENDPOINT) + 1 :]
        if not style_guide_id:
            if request.method == "GET":
                return httpx.Response(status_code=200, json=list(self.style_guides.values()))
            if request.method == "POST":
                fields = self._parse_multipart(request=request)
                self._counter += 1
                style_guide = {
                    "id": f"style_guide_{self._counter}",
                    "name": fields["name"],
                    "status": "processing",
                    "created_at": "2025-01-15T14:22:33Z",
                    "created_by": "tester",
                }
                self.style_guides[style_guide["id"]] = style_guide
                return self._json_response(status_code=200, payload=style_guide)
        style_guide = self.style_guides.get(style_guide_id)
        if style_guide is None:
            return self._json_response(status_code=404, payload={"message": "Style guide not found"})
        if request.method == "GET":
            return self._json_response(status_code=200, payload=style_guide)
        if request.method == "PATCH":
            style_guide.update(json.loads(request.read()))
            style_guide["updated_by"] = "tester"
            return self._json_response(status_code=200, payload=style_guide)
        if request.method == "DELETE":
            del self.style_guides[style_guide_id]
            return httpx.Response(status_code=204)
        return self._json_response(status_code=405, payload={"message": "Method not allowed"})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.headers.get("authorization") != "test-key":
            return self._json_response(
                status_code=401, payload={"message": "Could not validate credentials"}
            )
        for endpoint in STYLE_ENDPOINTS:
            if request.method == "POST" and path == endpoint:
                return self._handle_submit(request=request, endpoint=endpoint)
            if request.method == "GET" and path.startswith(f"{endpoint}/"):
                workflow_id = path[len(endpoint) + 1 :]
                return self._handle_poll(workflow_id=workflow_id, endpoint=endpoint)
        if path == STYLE_GUIDES_ENDPOINT or path.startswith(f"{STYLE_GUIDES_ENDPOINT}/"):
            return self._handle_style_guides(request=request, path=path)
        return self._json_response(status_code=404, payload={"message": "Not found"})

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


def make_config(
    transport: httpx.MockTransport,
    **overrides: t.Any,
) -> Config:
    """
    Build a test configuration routed through a mock transport.

    Parameters
    ----------
    transport : httpx.MockTransport
        Transport serving every request.
    **overrides : typing.Any
        Extra ``Config`` fields.

    Returns
    -------
    Config
        Configuration with no polling delay.
    """
    values: dict[str, t.Any] = {
        "api_key": "test-key",
        "platform_url": TEST_PLATFORM_URL,
        "poll_interval_seconds": 0,
        "client_factory": lambda: httpx.AsyncClient(transport=transport),
    }
    values.update(overrides)
    return Config(**values)


def json_transport(
    handler: t.Callable[[httpx.Request], tuple[int, dict[str, t.Any]] | httpx.Response],
) -> httpx.MockTransport:
    """
    Wrap a ``request -> (status, payload)`` function into a mock transport.
    """

    def _handler(request: httpx.Request) -> httpx.Response:
        outcome = handler(request)
        if isinstance(outcome, httpx.Response):
            return outcome
        status_code, payload = outcome
        return httpx.Response(status_code=status_code, content=json.dumps(payload).encode())

    return httpx.MockTransport(_handler)
