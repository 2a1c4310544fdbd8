import os
import json
import tempfile

import pytest

# keep test runs from writing logs into the working tree
os.environ.setdefault("LOCALEHTML_LOG_DIR", tempfile.mkdtemp(prefix="localehtml-logs-"))
os.environ.setdefault("CI", "true")


TEMPLATE = (
    "<!DOCTYPE html>\n<html>\n<head>\n<title>App</title>\n</head>\n"
    "<body>\n<div id=\"root\"></div>\n</body>\n</html>\n"
)


class FakeRenderer:
    """Renders `<p>{locale}</p>`; raises for locales listed in `fail`."""

    def __init__(self, fail=()):
        self.fail = set(fail)
        self.requests = []

    def render(self, request):
        self.requests.append(request)
        if request.locale in self.fail:
            raise RuntimeError(f"bad locale {request.locale}")
        return f"<p>{request.locale}</p>"

    def close(self):
        pass


class FakeAsyncRenderer(FakeRenderer):
    async def render(self, request):
        return FakeRenderer.render(self, request)


@pytest.fixture
def template_html():
    return TEMPLATE


@pytest.fixture
def write_json(tmp_path):
    def _write(relpath, data):
        path = tmp_path / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)
    return _write
