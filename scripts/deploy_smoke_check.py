"""Post-deploy smoke checks executed from the app container."""

from __future__ import annotations

import json
import urllib.error
import urllib.request
from datetime import UTC, datetime, timedelta
from uuid import uuid4

BASE_URL = "http://localhost:8000"
API_PREFIX = "/api"


def request(
    path: str,
    *,
    method: str = "GET",
    body: dict | None = None,
    expected: int = 200,
) -> bytes:
    payload = None
    req_headers = {"Accept": "application/json"}
    if body is not None:
        payload = json.dumps(body).encode("utf-8")
        req_headers["Content-Type"] = "application/json"

    request_obj = urllib.request.Request(
        f"{BASE_URL}{path}",
        data=payload,
        method=method,
        headers=req_headers,
    )
    try:
        with urllib.request.urlopen(request_obj, timeout=30) as response:
            content = response.read()
            status = response.getcode()
    except urllib.error.HTTPError as exc:  # pragma: no cover - runtime smoke script
        content = exc.read()
        status = exc.code

    if status != expected:
        body_text = content.decode("utf-8", errors="ignore")
        raise RuntimeError(f"{method} {path} -> {status}, expected {expected}: {body_text}")
    return content


def request_json(path: str, **kwargs) -> dict:
    return json.loads(request(path, **kwargs).decode("utf-8"))


def main() -> None:
    for endpoint in ["/health", "/ready", "/docs", "/metrics"]:
        request(endpoint, expected=200)

    suffix = uuid4().hex[:10]
    course = request_json(
        f"{API_PREFIX}/courses",
        method="POST",
        body={"title": f"Smoke Course {suffix}", "level": "Beginner", "capacity": 1},
        expected=201,
    )
    start_time = datetime.now(UTC) + timedelta(days=30)
    schedule = request_json(
        f"{API_PREFIX}/courses/{course['id']}/schedules",
        method="POST",
        body={
            "startTime": start_time.isoformat(),
            "endTime": (start_time + timedelta(hours=1)).isoformat(),
        },
        expected=201,
    )

    enrollment = request_json(
        f"{API_PREFIX}/enrollments",
        method="POST",
        body={
            "userEmail": f"deploy-smoke-{suffix}@langschool.dev",
            "courseId": course["id"],
            "scheduleId": schedule["id"],
        },
        expected=201,
    )
    approved = request_json(
        f"{API_PREFIX}/enrollments/{enrollment['id']}/approve",
        method="POST",
        expected=200,
    )
    if approved["status"] != "approved":
        raise RuntimeError(f"Unexpected status after approve: {approved['status']}")

    overflow = request_json(
        f"{API_PREFIX}/enrollments",
        method="POST",
        body={
            "userEmail": f"deploy-smoke-overflow-{suffix}@langschool.dev",
            "courseId": course["id"],
            "scheduleId": schedule["id"],
        },
        expected=409,
    )
    if overflow["error"]["code"] != "capacity_exceeded":
        raise RuntimeError(f"Unexpected error for full schedule: {overflow}")

    request(f"{API_PREFIX}/gallery", expected=200)
    request(f"{API_PREFIX}/timetable?dayOfWeek=Monday", expected=200)
    request(f"{API_PREFIX}/reports/overview", expected=200)

    print("Smoke checks passed.")


if __name__ == "__main__":
    main()
