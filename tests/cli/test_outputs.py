import logging

import pytest

from versionguard.cli.error_formatting import format_fatal_error
from versionguard.cli.outputs import format_outputs, write_outputs
from versionguard.cli.utils.logging import ActionsFormatter
from versionguard.versioning.exceptions import (
    CommitError,
    HistoryError,
    ManifestError,
    PushError,
)


@pytest.mark.short
class TestOutputs:
    def test_format_outputs(self):
        text = format_outputs({"version-updated": "true", "new-version": "1.0.1+2"})
        assert text == "version-updated=true\nnew-version=1.0.1+2\n"

    def test_format_multiline_value(self):
        text = format_outputs({"notes": "line one\nline two"})
        lines = text.splitlines()
        assert lines[0].startswith("notes<<ghadelimiter_")
        delimiter = lines[0].split("<<", 1)[1]
        assert lines[1:] == ["line one", "line two", delimiter]

    def test_write_outputs_appends(self, tmp_path):
        path = tmp_path / "github_output"
        path.write_text("existing=1\n")
        assert write_outputs({"current-version": "1.0.0+1"}, path) is True
        assert path.read_text() == "existing=1\ncurrent-version=1.0.0+1\n"

    def test_write_outputs_failure(self, tmp_path, capture_logs):
        path = tmp_path / "missing-dir" / "github_output"
        assert write_outputs({"a": "b"}, path) is False
        assert "Could not write outputs" in capture_logs.getvalue()


@pytest.mark.short
class TestErrorFormatting:
    def test_manifest_error(self):
        message = format_fatal_error(
            ManifestError("pubspec.yaml", "manifest not found"), color=False
        )
        assert message == (
            "[ERROR] Could not read version from manifest: "
            "pubspec.yaml: manifest not found"
        )

    def test_commit_error(self):
        message = format_fatal_error(CommitError("boom"), color=False)
        assert message == "[ERROR] boom. No tag was created."

    def test_push_error(self):
        message = format_fatal_error(PushError("main", "rejected"), color=False)
        assert message.startswith("[ERROR] Failed to push main: rejected.")
        assert "pushed manually" in message

    def test_other_error(self):
        message = format_fatal_error(HistoryError("no history"), color=False)
        assert message == "[ERROR] no history"

    def test_color(self):
        message = format_fatal_error(HistoryError("no history"), color=True)
        assert "\x1b[" in message
        assert message.endswith("no history")


@pytest.mark.short
class TestActionsFormatter:
    def make_record(self, level, msg):
        return logging.LogRecord("versionguard", level, __file__, 1, msg, None, None)

    def test_annotations(self):
        formatter = ActionsFormatter("%(message)s")
        warning = formatter.format(self.make_record(logging.WARNING, "careful"))
        assert warning == "::warning::careful"
        error = formatter.format(self.make_record(logging.ERROR, "50% done\nnext"))
        assert error == "::error::50%25 done%0Anext"

    def test_info_is_plain(self):
        formatter = ActionsFormatter("%(message)s")
        assert formatter.format(self.make_record(logging.INFO, "hello")) == "hello"
