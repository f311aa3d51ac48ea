from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

import pytest

from connhunt.config import ScanConfig
from connhunt.core.pipeline import ExtractionPipeline, extract_connections, scan_paths
from connhunt.core.types import Connection, ErrorKind, ExtractionError, ValidityPolicy
from connhunt.formats import QuotedLiteralExtractor
from connhunt.reporting import render_connections, render_errors


def _write(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def test_web_config_end_to_end(tmp_path: Path) -> None:
    target = _write(
        tmp_path / "web.config",
        '<add name="nets" connectionString="Data Source=db2; User Id=dvrpc;" '
        'providerName="System.OracleClient"/>',
    )

    result = scan_paths([tmp_path])

    assert result.connections == [
        Connection(
            source_path=str(target),
            data_source="db2",
            user_id="dvrpc",
            provider="System.OracleClient",
        )
    ]
    assert result.errors == []


def test_legacy_asp_end_to_end(tmp_path: Path) -> None:
    target = _write(tmp_path / "legacy.asp", '<% conn.Open "Data Source=db2; User Id=dvrpc;" %>')

    result = scan_paths([tmp_path])

    assert result.connections == []
    assert result.errors == [
        ExtractionError(source_path=str(target), message="missing required field: provider")
    ]


def test_multiple_declarations_stay_separate(tmp_path: Path) -> None:
    target = _write(
        tmp_path / "app.config",
        """<configuration>
  <connectionStrings>
    <add name="a" connectionString="Data Source=db1;User Id=u1;" providerName="P1" />
    <add name="b" connectionString="Data Source=db2;User Id=u2;" providerName="P2" />
    <add name="c" connectionString="Data Source=db3;" providerName="P3" />
  </connectionStrings>
  <appSettings>
    <add key="Theme" value="dark" />
  </appSettings>
</configuration>
""",
    )

    result = ExtractionPipeline().extract_file(target)

    assert [c.data_source for c in result.connections] == ["db1", "db2"]
    assert [e.message for e in result.errors] == ["missing required field: user id"]


def test_mixed_styles_follow_document_order(tmp_path: Path) -> None:
    target = _write(
        tmp_path / "default.aspx",
        """<%@ Page Language="VB" %>
<script runat="server">
  conn = New OleDbConnection("Provider=OraOLEDB.Oracle;Data Source=first;User ID=dvrpc;Password=x;")
</script>
<add name="second" connectionString="Data Source=second;User Id=app;" providerName="Oracle" />
<script runat="server">
  Response.Write("hello")
  other = New OleDbConnection("Provider=MSDAORA;
      Data Source=third;User ID=dvrpc;")
</script>
""",
    )

    result = ExtractionPipeline().extract_file(target)

    assert [c.data_source for c in result.connections] == ["first", "second", "third"]
    assert result.errors == []


def test_appsettings_json_block(tmp_path: Path) -> None:
    target = _write(
        tmp_path / "appsettings.json",
        """{
  // comments keep this from being strict JSON
  "Logging": { "LogLevel": { "Default": "Information" } },
  "ConnectionStrings": {
    // primary database
    "Reporting": "Data Source=db2;User Id=dvrpc;Provider=OraOLEDB.Oracle",
    "Audit": "Data Source=audit\\\\db;User Id=aud;ProviderName=System.Data.OracleClient",
    "Redis": "localhost:6379",
    "Timeout": 30,
    "Broken": "Data Source=db4;Provider=OraOLEDB.Oracle",
  },
}
""",
    )

    result = ExtractionPipeline().extract_file(target)

    assert [(c.data_source, c.provider) for c in result.connections] == [
        ("db2", "OraOLEDB.Oracle"),
        ("audit\\db", "System.Data.OracleClient"),
    ]
    assert [e.message for e in result.errors] == ["missing required field: user id"]


def test_concatenated_asp_string_reports_one_declaration(tmp_path: Path) -> None:
    target = _write(
        tmp_path / "global.asp",
        '<% conn.Open "Provider=MSDAORA;Data Source=" & ds & ";User Id=" & uid %>',
    )

    result = ExtractionPipeline().extract_file(target)

    assert result.connections == []
    assert [e.message for e in result.errors] == ["missing required field: user id"]


def test_unreadable_file_yields_single_error(tmp_path: Path) -> None:
    missing = tmp_path / "gone.config"
    recorded: List[Tuple[Path, ExtractionError]] = []

    pipeline = ExtractionPipeline(on_error=lambda path, error: recorded.append((path, error)))
    result = pipeline.run([missing])

    assert result.connections == []
    assert len(result.errors) == 1
    error = result.errors[0]
    assert error.kind is ErrorKind.UNREADABLE_FILE
    assert error.message.startswith("could not read file")
    assert recorded == [(missing, error)]


def test_binary_file_is_unreadable(tmp_path: Path) -> None:
    target = tmp_path / "blob.config"
    target.write_bytes(b"\x00\xff\x00\xfe" * 64)

    result = ExtractionPipeline().extract_file(target)

    assert [e.message for e in result.errors] == ["could not read file (binary content)"]


def test_oversized_file_is_unreadable(tmp_path: Path) -> None:
    target = _write(tmp_path / "big.config", "x" * 64)

    result = ExtractionPipeline(ScanConfig(max_file_bytes=16)).extract_file(target)

    assert result.errors[0].message == "could not read file (exceeds 16 byte limit)"


def test_utf16_files_are_decoded(tmp_path: Path) -> None:
    target = tmp_path / "web.config"
    content = '<add name="x" connectionString="Data Source=db;User Id=u;" providerName="P" />'
    target.write_bytes(content.encode("utf-16"))

    result = ExtractionPipeline().extract_file(target)

    assert [c.data_source for c in result.connections] == ["db"]


def test_unrouted_extension_contributes_nothing(tmp_path: Path) -> None:
    target = _write(tmp_path / "notes.txt", '"Data Source=db;User Id=u;Provider=P"')

    result = extract_connections([target])

    assert result.connections == []
    assert result.errors == []


def test_file_and_candidate_order_is_preserved(tmp_path: Path) -> None:
    first = _write(tmp_path / "b.asp", '"Provider=P;Data Source=b1;User Id=u" "Provider=P;Data Source=b2;User Id=u"')
    second = _write(tmp_path / "a.asp", '"Provider=P;Data Source=a1;User Id=u"')

    result = extract_connections([first, second])

    assert [c.data_source for c in result.connections] == ["b1", "b2", "a1"]


def test_scan_is_idempotent(tmp_path: Path) -> None:
    _write(tmp_path / "site" / "web.config", '<add connectionString="Data Source=db;User Id=u;" providerName="P"/>')
    _write(tmp_path / "site" / "old" / "legacy.asp", '"Data Source=db2; User Id=dvrpc;"')
    _write(tmp_path / "appsettings.json", '{"ConnectionStrings": {"A": "Data Source=x;User Id=y;Provider=z"}}')

    def _render() -> Tuple[str, str]:
        import io

        result = scan_paths([tmp_path])
        connections, errors = io.StringIO(), io.StringIO()
        render_connections(result.connections, connections)
        render_errors(result.errors, errors)
        return connections.getvalue(), errors.getvalue()

    assert _render() == _render()


def test_lenient_policy_from_config(tmp_path: Path) -> None:
    target = _write(tmp_path / "legacy.asp", '"Data Source=db2; User Id=dvrpc;"')

    result = ExtractionPipeline(ScanConfig(policy=ValidityPolicy.LENIENT)).extract_file(target)

    assert [(c.data_source, c.provider) for c in result.connections] == [("db2", "")]
    assert result.errors == []


def test_lenient_tags_pick_up_custom_elements(tmp_path: Path) -> None:
    content = '<database connection="main" provider="Oracle" data-source="x" />\n<connection Provider="P" User_Id="u" />'
    target = _write(tmp_path / "custom.config", content)

    strict_tags = ExtractionPipeline().extract_file(target)
    lenient_tags = ExtractionPipeline(ScanConfig(lenient_tags=True)).extract_file(target)

    assert strict_tags.errors == [] and strict_tags.connections == []
    assert len(lenient_tags.errors) == 2


def test_explicit_extractors_limit_routing(tmp_path: Path) -> None:
    target = _write(tmp_path / "web.config", '<add connectionString="Data Source=db;User Id=u;" providerName="P"/>')

    pipeline = ExtractionPipeline(extractors=(QuotedLiteralExtractor(extensions=(".config",)),))
    result = pipeline.extract_file(target)

    assert result.connections == []
    assert result.errors == [
        ExtractionError(
            source_path=str(target),
            message="missing required field: provider",
        )
    ]


def test_scan_skips_walk_failures(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("WARNING", logger="connhunt")

    result = scan_paths([tmp_path / "missing"])

    assert result.connections == [] and result.errors == []
    assert "not a directory" in caplog.text
