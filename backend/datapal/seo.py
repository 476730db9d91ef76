"""robots.txt and sitemap.xml."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from datapal.core.config import Settings

PRIVATE_PATHS = ["/dashboard", "/create", "/report/*", "/api/*"]

# AI crawlers get the same private routes blocked, everything public allowed
AI_CRAWLERS = ["GPTBot", "ChatGPT-User", "PerplexityBot", "Google-Extended"]


def robots(settings: Settings) -> Dict[str, Any]:
    rules = [{"userAgent": "*", "allow": ["/"], "disallow": list(PRIVATE_PATHS)}]
    rules += [{"userAgent": agent, "allow": ["/"], "disallow": list(PRIVATE_PATHS)} for agent in AI_CRAWLERS]
    return {"rules": rules, "sitemap": f"{settings.public_url}/sitemap.xml"}


def render_robots(doc: Dict[str, Any]) -> str:
    lines: List[str] = []
    for rule in doc["rules"]:
        lines.append(f"User-Agent: {rule['userAgent']}")
        lines.extend(f"Allow: {path}" for path in rule.get("allow", []))
        lines.extend(f"Disallow: {path}" for path in rule.get("disallow", []))
        lines.append("")
    lines.append(f"Sitemap: {doc['sitemap']}")
    return "\n".join(lines) + "\n"


def sitemap(settings: Settings, now: Optional[datetime] = None) -> List[Dict[str, Any]]:
    # Dashboard and reports sit behind auth and stay out of the public sitemap.
    last_modified = (now or datetime.now(timezone.utc)).isoformat()
    base = settings.public_url
    return [
        {"url": base, "lastModified": last_modified, "changeFrequency": "daily", "priority": 1.0},
        {"url": f"{base}/login", "lastModified": last_modified, "changeFrequency": "monthly", "priority": 0.8},
        {"url": f"{base}/register", "lastModified": last_modified, "changeFrequency": "monthly", "priority": 0.8},
    ]


def render_sitemap(entries: List[Dict[str, Any]]) -> str:
    out = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for entry in entries:
        out.append("<url>")
        out.append(f"<loc>{escape(entry['url'])}</loc>")
        out.append(f"<lastmod>{entry['lastModified']}</lastmod>")
        out.append(f"<changefreq>{entry['changeFrequency']}</changefreq>")
        out.append(f"<priority>{entry['priority']}</priority>")
        out.append("</url>")
    out.append("</urlset>")
    return "\n".join(out) + "\n"
