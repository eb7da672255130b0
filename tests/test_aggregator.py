import pytest

from l10nscan.core.aggregator import filter_results, merge, render, summarize
from l10nscan.core.models import FileReport, Finding, GroupedResults, Summary


def report(path, *texts):
    return FileReport.from_findings(path, [Finding(path, t) for t in texts])


@pytest.fixture()
def grouped():
    return merge(GroupedResults.empty(), [
        report("/app/lib/home.dart", "Welcome", "Sign in"),
        report("/app/lib/about.dart", "About <us> & more"),
    ])


def test_merge_is_first_write_wins(grouped):
    again = merge(grouped, [report("/app/lib/home.dart", "Something else")])
    assert again["/app/lib/home.dart"] == "Hardcoded Text: Welcome\nHardcoded Text: Sign in"
    assert again is grouped


def test_merge_same_report_twice_is_idempotent():
    r = report("/app/lib/a.dart", "A")
    once = merge(GroupedResults.empty(), [r])
    twice = merge(merge(GroupedResults.empty(), [r]), [r])
    assert once == twice
    assert merge(GroupedResults.empty(), [r, r]) == once


def test_merge_bumps_version_and_keeps_input(grouped):
    assert grouped.version == 1
    bigger = merge(grouped, [report("/app/lib/new.dart", "New")])
    assert bigger.version == 2
    assert len(bigger) == 3
    assert len(grouped) == 2
    assert list(bigger) == ["/app/lib/home.dart", "/app/lib/about.dart", "/app/lib/new.dart"]


def test_merge_skips_empty_reports():
    assert len(merge(GroupedResults.empty(), [FileReport("/a.dart", "")])) == 0


def test_summarize_counts_non_empty_lines(grouped):
    assert summarize(grouped) == Summary(file_count=2, text_count=3)
    padded = merge(GroupedResults.empty(), [FileReport("/a.dart", "\nHardcoded Text: A\n\nHardcoded Text: B")])
    assert summarize(padded) == Summary(file_count=1, text_count=2)


def test_filter_is_case_insensitive_and_non_destructive(grouped):
    before = grouped.as_dict()
    hits = filter_results(grouped, "SIGN")
    assert list(hits) == ["/app/lib/home.dart"]
    assert grouped.as_dict() == before
    assert len(grouped) == 2


def test_filter_with_empty_query_returns_everything(grouped):
    assert filter_results(grouped, "") == grouped
    assert filter_results(grouped, None) == grouped


def test_results_are_read_only(grouped):
    with pytest.raises(TypeError):
        grouped._entries["/x.dart"] = "Hardcoded Text: X"


def test_render_html(grouped):
    html = render(grouped)
    assert html.startswith("<p>Found 2 file(s) with hardcoded text(s) and 3 hardcoded text(s) in your project.</p>")
    assert '<a href="file:///app/lib/home.dart">File: home.dart(2)</a>' in html
    assert "&bull; Welcome<br/>" in html
    assert "About &lt;us&gt; &amp; more" in html
    assert html.index("home.dart") < html.index("about.dart")


def test_render_markdown(grouped):
    md = render(grouped, "markdown")
    assert "[File: about.dart(1)](file:///app/lib/about.dart)" in md
    assert "  - Sign in" in md


def test_render_rejects_unknown_format(grouped):
    with pytest.raises(ValueError):
        render(grouped, "pdf")
