"""robots.txt and sitemap.xml."""

from datetime import datetime, timezone

from datapal import seo


def test_robots_document(settings):
    doc = seo.robots(settings)
    assert doc["rules"][0]["userAgent"] == "*"
    assert doc["rules"][0]["allow"] == ["/"]
    assert doc["rules"][0]["disallow"] == ["/dashboard", "/create", "/report/*", "/api/*"]
    assert doc["sitemap"] == "https://datapal.test/sitemap.xml"
    assert [r["userAgent"] for r in doc["rules"][1:]] == seo.AI_CRAWLERS


def test_robots_txt_route(client):
    r = client.get("/robots.txt")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.headers["cache-control"] == "public, max-age=60"
    text = r.text
    assert text.startswith("User-Agent: *\nAllow: /\nDisallow: /dashboard\n")
    assert "Disallow: /api/*" in text
    assert "User-Agent: GPTBot" in text
    assert text.rstrip().endswith("Sitemap: https://datapal.test/sitemap.xml")


def test_sitemap_entries(settings):
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    entries = seo.sitemap(settings, now=now)
    assert [e["url"] for e in entries] == [
        "https://datapal.test",
        "https://datapal.test/login",
        "https://datapal.test/register",
    ]
    assert entries[0]["priority"] == 1.0
    assert entries[1]["changeFrequency"] == "monthly"


def test_sitemap_route(client):
    r = client.get("/sitemap.xml")
    assert r.status_code == 200
    assert r.headers["content-type"].startswith("application/xml")
    assert "<loc>https://datapal.test/register</loc>" in r.text
    assert "/dashboard" not in r.text
