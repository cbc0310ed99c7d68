from __future__ import annotations


def build_allowed_origins(*, frontend_base_url: str, frontend_url: str | None, frontend_urls: str | None) -> list[str]:
    allowed: set[str] = {
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    }

    if frontend_base_url:
        allowed.add(frontend_base_url)

    for v in [frontend_url, frontend_urls]:
        if not v:
            continue
        for origin in [s.strip() for s in str(v).split(",") if s.strip()]:
            allowed.add(origin)

    return sorted(allowed)
