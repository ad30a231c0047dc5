# tests/test_render.py
"""Whole-render behavior: entry points, sinks and cross-cutting guarantees."""

import io
import threading

import pytest

from moustachio import TemplateRenderer, compile_template, render


@pytest.mark.parametrize("template", ["", "plain text", "{ single braces }\n  indented\n", "} }} {"])
def test_templates_without_tags_render_verbatim(template):
    assert render(template, {"anything": 1}) == template


@pytest.mark.parametrize("value", ['<script>alert("x")</script>', "a & b", '"quoted"'])
def test_escaped_values_contain_no_special_characters(value):
    out = render("{{v}}", {"v": value})
    assert not set('<>"') & set(out)
    assert out.replace("&amp;", "").replace("&lt;", "").replace("&gt;", "").replace("&quot;", "").count("&") == 0


@pytest.mark.parametrize("data", [{"a": {"b": "x"}}, {"a": {"b": 1.5}}, {"a": {}}])
def test_dotted_name_equals_section_form(data):
    assert render("{{a.b}}", data) == render("{{#a}}{{b}}{{/a}}", data)


@pytest.mark.parametrize("path", ["a.x", "a.x.y", "a.x.y.z.w.v"])
def test_broken_chains_of_any_length_are_empty(path):
    assert render("{{" + path + "}}", {"a": {"b": 1}}) == ""


def test_sink_receives_output():
    sink = io.StringIO()
    assert render("Hello, {{subject}}!", {"subject": "world"}, sink=sink) == ""
    assert sink.getvalue() == "Hello, world!"


def test_none_data_is_an_empty_root():
    assert render("[{{x}}]") == "[]"


def test_compiled_tree_shared_across_threads():
    nodes = compile_template("{{#items}}{{.}}{{/items}}")
    renderer = TemplateRenderer()
    results = {}

    def work(n):
        results[n] = renderer.render(nodes, {"items": list(range(n))})

    threads = [threading.Thread(target=work, args=(n,)) for n in range(1, 9)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert results == {n: "".join(str(i) for i in range(n)) for n in range(1, 9)}


def test_library_render_writes_nothing_to_stdout(capsys):
    assert render("Hello, {{subject}}!", {"subject": "world"}) == "Hello, world!"
    captured = capsys.readouterr()
    assert captured.out == ""
