import asyncio

from conftest import FakeAsyncRenderer, FakeRenderer
from localehtml.pipeline import (
    LocaleHtmlBuilder,
    OutputMode,
    SimpleTemplateEngine,
    render_tag,
    script_tag,
)
from localehtml.startup import unresolved_placeholders


def test_build_emits_one_document_per_rendered_locale(template_html):
    builder = LocaleHtmlBuilder({"locales": "en-US,fr,de"})
    result = builder.build(template_html, ["main.js"], "SRC", FakeRenderer(fail={"fr"}))

    assert result.locales == ["en/US", "fr", "de"]
    assert [d.name for d in result.documents] == ["index.en-US.html", "index.de.html"]
    assert result.errors == ["localehtml: Failed to prerender localized HTML for fr"]
    assert not result.ok

    doc = result.documents[0].content
    assert '<div id="root"><p>en-US</p></div>' in doc
    assert doc.index("<script") < doc.index("</head>")
    assert '["main.js"]' in doc
    assert unresolved_placeholders(doc) == []


def test_fallback_uses_standard_startup(template_html):
    builder = LocaleHtmlBuilder({"locales": "en", "screen_types": [{"name": "hd"}]})
    result = builder.build(template_html, ["a.js", "b.js"], "SRC", FakeRenderer())

    assert result.ok
    assert '<div id="root"></div>' in result.fallback_html
    assert '["a.js","b.js"]' in result.fallback_html
    assert "screenTypes" not in result.fallback_html
    assert '[{"name":"hd"}]' in result.documents[0].content


def test_missing_root_blocks_localized_documents_only():
    builder = LocaleHtmlBuilder({"locales": ["en", "fr"]})
    result = builder.build("<html><head></head><body></body></html>", ["main.js"], "SRC", FakeRenderer())

    assert result.documents == []
    assert result.status.content == {"en": "<p>en</p>", "fr": "<p>fr</p>"}
    assert len(result.errors) == 1
    assert "Unable find root div element" in result.errors[0]
    assert "<script" in result.fallback_html


def test_virtual_output_skips_prerendering(template_html):
    renderer = FakeRenderer()
    builder = LocaleHtmlBuilder({"locales": "en"}, output_mode=OutputMode.VIRTUAL)
    result = builder.build(template_html, ["main.js"], "SRC", renderer)

    assert renderer.requests == []
    assert result.documents == []
    assert result.ok
    assert "<script" in result.fallback_html


def test_default_options(tmp_path):
    builder = LocaleHtmlBuilder({"locales": None}, context=str(tmp_path))
    assert builder.options["chunk"] == "main.js"
    assert builder.options["locales"] == "used"
    assert builder.locales == []


def test_before_html_processing_forces_body_inject(template_html):
    builder = LocaleHtmlBuilder({"locales": "en"})
    assert builder.before_html_processing(["main.js"]) == {"inject": "body", "js": []}
    assert unresolved_placeholders(builder.iso_startup) == []
    assert unresolved_placeholders(builder.std_startup) == []


def test_metadata_hooks_follow_render_status(template_html):
    builder = LocaleHtmlBuilder({"locales": "en-US,fr-FR"})
    builder.prerender("SRC", FakeRenderer(fail={"fr-FR"}))

    assert builder.meta_list_localized([]) == [{"generate": "resources/en/US/appinfo.json"}]
    assert builder.meta_localized_appinfo({}, "en/US")["usePrerendering"] is True
    assert builder.meta_localized_appinfo({}, "fr/FR") == {}


def test_builds_do_not_share_state(template_html):
    first = LocaleHtmlBuilder({"locales": "en"}).build(template_html, [], "", FakeRenderer(fail={"en"}))
    second = LocaleHtmlBuilder({"locales": "en"}).build(template_html, [], "", FakeRenderer())
    assert first.status.failed == ["en"]
    assert second.status.failed == []
    assert second.errors == []


def test_build_async(template_html):
    builder = LocaleHtmlBuilder({"locales": "en,ko"})
    result = asyncio.run(builder.build_async(template_html, ["main.js"], "SRC", FakeAsyncRenderer(fail={"ko"})))
    assert [d.name for d in result.documents] == ["index.en.html"]
    assert result.status.failed == ["ko"]


def test_simple_engine_injection():
    engine = SimpleTemplateEngine()
    tag = script_tag("x()")
    assert render_tag(tag) == '<script type="text/javascript">x()</script>'
    assert engine.post_process("<HEAD></HEAD>", [tag]) == '<HEAD><script type="text/javascript">x()</script></HEAD>'
    assert engine.post_process("<body></body>", [tag]).startswith("<script")


def test_repeated_locale_emits_one_document(template_html):
    renderer = FakeRenderer()
    result = LocaleHtmlBuilder({"locales": "en,en"}).build(template_html, ["main.js"], "SRC", renderer)

    assert result.locales == ["en"]
    assert [d.name for d in result.documents] == ["index.en.html"]
    assert len(renderer.requests) == 1


def test_metadata_hooks_idle_without_file_system_build(template_html):
    builder = LocaleHtmlBuilder({"locales": "en"}, output_mode=OutputMode.VIRTUAL)
    builder.build(template_html, ["main.js"], "SRC", FakeRenderer())

    assert builder.meta_list_localized([]) == []
    assert builder.meta_localized_appinfo({}, "en") == {}


def test_appinfo_untouched_before_prerender():
    builder = LocaleHtmlBuilder({"locales": "en"})
    assert builder.meta_localized_appinfo({"main": "index.html"}, "en") == {"main": "index.html"}


def test_build_drives_coroutine_renderer(template_html):
    builder = LocaleHtmlBuilder({"locales": "en,ko"})
    result = builder.build(template_html, ["main.js"], "SRC", FakeAsyncRenderer(fail={"ko"}))

    assert [d.name for d in result.documents] == ["index.en.html"]
    assert '<div id="root"><p>en</p></div>' in result.documents[0].content
    assert result.errors == ["localehtml: Failed to prerender localized HTML for ko"]


def test_non_markup_result_fails_that_locale_only(template_html):
    def render(request):
        return None if request.locale == "fr" else "<p/>"

    result = LocaleHtmlBuilder({"locales": "en,fr"}).build(template_html, [], "SRC", render)
    assert [d.name for d in result.documents] == ["index.en.html"]
    assert result.status.failed == ["fr"]


def test_startup_composition_is_repeatable():
    builder = LocaleHtmlBuilder({"locales": "en"})
    builder.before_html_processing(["main.js"])
    first = (builder.iso_startup, builder.std_startup)
    builder.before_html_processing(["main.js"])
    assert (builder.iso_startup, builder.std_startup) == first


def test_html_processing_without_compose_step(template_html):
    builder = LocaleHtmlBuilder({"locales": "en"})
    builder.prerender("SRC", FakeRenderer())
    fallback = builder.after_html_processing(template_html, SimpleTemplateEngine())

    assert [d.name for d in builder.documents] == ["index.en.html"]
    assert unresolved_placeholders(fallback) == []
