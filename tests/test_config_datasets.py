"""Tests for sys_info, its command-line wrapper and the sample data helper."""

import io
import sys

import pytest

from fsformats import fetch_sample_subject, sys_info
from fsformats._config import _extra_of, _requirement_name
from fsformats.commands import sys_info as sys_info_cmd
from fsformats.datasets import SAMPLE_FILES


class TestSysInfo:
    def test_report_sections(self):
        buf = io.StringIO()
        sys_info(fid=buf)
        text = buf.getvalue()
        assert "Platform:" in text
        assert "Logical cores:" in text
        assert "Dependencies info" in text
        assert "numpy:" in text
        assert "Optional" not in text

    def test_developer_lists_extras(self):
        buf = io.StringIO()
        sys_info(fid=buf, developer=True)
        text = buf.getvalue()
        assert "Optional 'test' info" in text
        assert "pytest:" in text

    def test_command(self, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", ["fsformats-sys_info"])
        sys_info_cmd.run()
        assert "Dependencies info" in capsys.readouterr().out

    @pytest.mark.parametrize(
        "req, name, extra",
        [
            ("numpy>=1.21", "numpy", None),
            ("psutil", "psutil", None),
            ('pooch; extra == "data"', "pooch", "data"),
            ("fsformats[data,test]; extra == 'all'", "fsformats", "all"),
        ],
    )
    def test_requirement_parsing(self, req, name, extra):
        assert _requirement_name(req) == name
        assert _extra_of(req) == extra


class TestFetchSampleSubject:
    def test_complete_local_directory_is_used(self, tmp_path):
        for rel_path in SAMPLE_FILES:
            target = tmp_path / rel_path
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_bytes(b"")
        paths = fetch_sample_subject(tmp_path)
        assert paths["sdir"] == str(tmp_path)
        assert paths["lh_white"] == str(tmp_path / "surf" / "lh.white")
        assert paths["rh_annot"] == str(tmp_path / "label" / "rh.aparc.DKTatlas.mapped.annot")
        assert len(paths) == len(SAMPLE_FILES) + 1

    def test_result_keys(self):
        keys = {key for key, _ in SAMPLE_FILES.values()}
        for hemi in ("lh", "rh"):
            for kind in ("white", "curv", "thickness", "annot", "label"):
                assert f"{hemi}_{kind}" in keys
