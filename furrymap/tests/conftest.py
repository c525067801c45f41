"""Shared pages, a fake furrymap site and a stub country lookup."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path
from urllib.parse import parse_qs

import httpx
import pytest

from furrymap.client import FurryMap
from furrymap.config import Config, Credentials

LOGIN_HTML = """\
<html><body>
<form id="login_form" method="post">
  <input type="hidden" id="signin__csrf_token" name="signin[_csrf_token]" value="login-token">
</form>
</body></html>
"""

LOGIN_ERROR_HTML = """\
<html><body>
<form id="login_form" method="post">
  <ul class="error_list"><li>The username and/or password is invalid.</li></ul>
  <input type="hidden" id="signin__csrf_token" value="login-token-2">
</form>
</body></html>
"""

LOGGED_IN_HTML = "<html><body><p>Welcome back!</p></body></html>"

SEARCH_FORM_HTML = """\
<html><body>
<form id="namefinder" method="post">
  <input type="hidden" id="namefinder__csrf_token" name="namefinder[_csrf_token]" value="search-token">
</form>
</body></html>
"""

LISTING_HTML = """\
<div id="userlocation_1">
  <div>
    <a href="/profile/Foxy" id="user_42">Foxy</a>
    <img src="/images/male.png" alt="male">
    <small><span><img src="/images/flags/de.png" title="Germany"></span></small>
    <small>Fox, 3 markers</small>
  </div>
  <div>
    <a href="/profile/Wolfy" id="user_7"> Wolfy </a>
    <small>5 markers</small>
  </div>
</div>
"""

MARKERS_HTML = """\
<div id="markersitems">
  <div id="marker_100">
    <div>
      <b><a href="/profile/Foxy">Foxy</a>: Home sweet home</b>
      <small>
        <img src="/images/home.png">
        <a href="http://maps.google.com/maps?daddr=52.52,13.405&amp;z=12">Route</a>
      </small>
    </div>
  </div>
  <div id="marker_101">
    <div>
      <b><a href="/profile/Wolfy">Wolfy</a>: Office</b>
      <small><a href="http://maps.google.com/maps?daddr=40.7128,-74.006">Route</a></small>
    </div>
  </div>
</div>
"""

SEARCH_RESULTS_HTML = f"""\
<html><body>
<div id="results">
{LISTING_HTML}
{MARKERS_HTML}
</div>
</body></html>
"""

PROFILE_HTML = f"""\
<html><body>
<div id="middle_content">
  <h3>About me</h3>
  <div>
    <div><b>Other nicknames:</b> Fuzzball</div>
    <div><b>Relationship status:</b> Single</div>
    <div><b>Furry species:</b> Red fox</div>
  </div>
  <h3>Reallife</h3>
  <div>
    <div><b>Realname:</b> Jane Doe</div>
    <div><b>Age:</b> 30</div>
    <div>Berlin , Germany</div>
    <div><b>Cell number:</b> 0123 456789</div>
  </div>
  <h3>Messenger</h3>
  <div>
    <div><b>Telegram: </b><a href="https://t.me/foxy">foxy</a></div>
    <div><b>Skype: </b><a href="skype:foxy.skype">foxy.skype</a></div>
  </div>
  <h3>Websites</h3>
  <div>
    <div><b>Homepage: </b><a href="https://foxy.example">My site</a></div>
    <div><b>Twitter: </b><a href="https://twitter.com/foxy">@foxy</a></div>
  </div>
  <h3>Friends</h3>
{LISTING_HTML}
{MARKERS_HTML}
</div>
</body></html>
"""

FEED = {
    "combined": {
        "geojson": {
            "features": [
                [13.405, 52.52, 1, "Berlin", 3, "Foxy", "/profile/Foxy", 42],
                [-74.006, 40.7128, 2, "NYC", 1, "Wolfy", "/profile/Wolfy", 0],
            ]
        }
    }
}


class StubLookup:
    """Country lookup that records every call."""

    def __init__(self) -> None:
        self.calls: list[tuple[float, float]] = []

    def lookup(self, longitude: float, latitude: float) -> str | None:
        self.calls.append((longitude, latitude))
        return "Germany" if longitude > 0 else "United States"


class FakeSite:
    """In-memory furrymap.net served through ``httpx.MockTransport``."""

    def __init__(
        self,
        *,
        login_html: str = LOGGED_IN_HTML,
        search_results_html: str = SEARCH_RESULTS_HTML,
        profile_html: str = PROFILE_HTML,
        feed: object = FEED,
    ) -> None:
        self.login_html = login_html
        self.search_results_html = search_results_html
        self.profile_html = profile_html
        self.feed_body = feed if isinstance(feed, str) else json.dumps(feed)
        self.requests: list[httpx.Request] = []
        self.forms: list[dict[str, str]] = []

    def count(self, method: str, path: str) -> int:
        return sum(
            1 for r in self.requests if r.method == method and r.url.path == path
        )

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if request.method == "POST":
            form = {k: v[0] for k, v in parse_qs(request.content.decode(), keep_blank_values=True).items()}
            self.forms.append(form)
            if path == "/en/login":
                return httpx.Response(
                    200,
                    text=self.login_html,
                    headers={"Set-Cookie": "symfony=session-1; path=/"},
                )
            if path == "/en/search/":
                return httpx.Response(200, text=self.search_results_html)
        else:
            if path == "/en/login":
                return httpx.Response(200, text=LOGIN_HTML)
            if path == "/en/search/":
                return httpx.Response(200, text=SEARCH_FORM_HTML)
            if path.startswith("/profile/"):
                return httpx.Response(200, text=self.profile_html)
            if path == "/en/marker/list/type/combined":
                return httpx.Response(200, text=self.feed_body)
        return httpx.Response(404, text="not found")

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)


@pytest.fixture
def lookup() -> StubLookup:
    return StubLookup()


@pytest.fixture
def site() -> FakeSite:
    return FakeSite()


@pytest.fixture
def make_client(
    tmp_path: Path, lookup: StubLookup
) -> Callable[..., FurryMap]:
    """Build clients against a :class:`FakeSite`, caching under *tmp_path*."""

    def _make(site: FakeSite, *, credentials: Credentials | None = None) -> FurryMap:
        config = Config(
            cache_name=str(tmp_path / "furrymapCache.json"),
            credentials=credentials,
        )
        return FurryMap(config, country_lookup=lookup, transport=site.transport)

    return _make
