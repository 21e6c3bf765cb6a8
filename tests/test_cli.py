"""Tests for argument parsing, configuration loading and the entry point."""

import json
from unittest.mock import patch

import pytest

from args import parse_args
from cli_config import ConfigError, build_config, load_config_file
from constants import ExitCodes
import pomversions


POM = """<project>
  <groupId>org.example</groupId>
  <artifactId>app</artifactId>
  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>2.0-SNAPSHOT</version>
    </dependency>
  </dependencies>
</project>
"""


class TestArgParsing:
    """CLI flags."""

    def test_defaults(self):
        ns = parse_args([])
        assert ns.POM_FILE == "pom.xml"
        assert ns.LOG_LEVEL == "INFO"
        assert ns.DRY_RUN is False
        assert ns.comparison_method is None
        assert ns.accept_qualified_releases is None

    def test_flags(self):
        ns = parse_args([
            "-f", "other.xml",
            "--comparison-method", "Mercury",
            "--accept-qualified-releases",
            "--qualifier-includes", "alpha,beta",
            "--no-dependency-management",
            "--include-reactor",
            "--backup",
            "--version-range", "[1.0,2.0)",
            "--dry-run",
        ])
        assert ns.POM_FILE == "other.xml"
        assert ns.comparison_method == "mercury"
        assert ns.accept_qualified_releases is True
        assert ns.qualifier_includes == "alpha,beta"
        assert ns.process_dependency_management is False
        assert ns.exclude_reactor is False
        assert ns.generate_backup_poms is True
        assert ns.DRY_RUN is True
        assert ns.version_range == "[1.0,2.0)"

    def test_invalid_comparison_method(self):
        with pytest.raises(SystemExit):
            parse_args(["--comparison-method", "semver"])


class TestBuildConfig:
    """Precedence: defaults < file < CLI."""

    def test_defaults(self):
        config = build_config(parse_args([]))
        assert config.comparison_method == "maven"
        assert config.process_dependencies

    def test_file_values(self, tmp_path):
        path = tmp_path / "pomversions.yml"
        path.write_text(
            "comparison-method: numeric\n"
            "accept_qualified_releases: true\n"
            "qualifier_includes: [alpha, beta]\n"
            "excludes: 'org.skip:*, org.other'\n",
            encoding="utf-8",
        )
        config = build_config(parse_args(["-c", str(path)]))
        assert config.comparator.name == "numeric"
        assert config.accept_qualified_releases is True
        assert config.qualifier_includes == ("alpha", "beta")
        assert config.excludes == ("org.skip:*", "org.other")

    def test_cli_overrides_file(self, tmp_path):
        path = tmp_path / "pomversions.json"
        path.write_text(json.dumps({"comparison_method": "numeric", "allow_snapshots": False}), encoding="utf-8")
        config = build_config(parse_args(["-c", str(path), "--comparison-method", "mercury", "--allow-snapshots"]))
        assert config.comparison_method == "mercury"
        assert config.allow_snapshots is True

    def test_version_range_from_file(self, tmp_path):
        path = tmp_path / "pomversions.yml"
        path.write_text("version-range: '[1.0,2.0)'\n", encoding="utf-8")
        config = build_config(parse_args(["-c", str(path)]))
        assert config.version_range == "[1.0,2.0)"
        assert config.allowed_range.contains("1.5")
        assert not config.allowed_range.contains("2.0")

    def test_bad_version_range(self):
        with pytest.raises(ConfigError):
            build_config(parse_args(["--version-range", "[1.0,2.0"]))

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "pomversions.yml"
        path.write_text("colour: blue\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            build_config(parse_args(["-c", str(path)]))

    def test_wrong_type(self, tmp_path):
        path = tmp_path / "pomversions.yml"
        path.write_text("allow_snapshots: 'yes please'\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            build_config(parse_args(["-c", str(path)]))

    def test_bad_qualifier_pattern(self):
        with pytest.raises(ConfigError):
            build_config(parse_args(["--qualifier-includes", "beta("]))

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_config_file(str(tmp_path / "missing.yml"))

    def test_non_mapping_file(self, tmp_path):
        path = tmp_path / "pomversions.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config_file(str(path))

    def test_empty_file(self, tmp_path):
        path = tmp_path / "pomversions.yml"
        path.write_text("", encoding="utf-8")
        assert load_config_file(str(path)) == {}


class TestMain:
    """Exit codes of the entry point."""

    def write_files(self, tmp_path, versions):
        pom = tmp_path / "pom.xml"
        pom.write_text(POM, encoding="utf-8")
        versions_file = tmp_path / "versions.json"
        versions_file.write_text(json.dumps(versions), encoding="utf-8")
        return pom, versions_file

    def run_main(self, argv):
        with pytest.raises(SystemExit) as excinfo:
            pomversions.main(argv)
        return excinfo.value.code

    def test_success(self, tmp_path):
        pom, versions_file = self.write_files(tmp_path, {"org.example:lib": ["2.0"]})
        code = self.run_main(["-f", str(pom), "--versions-file", str(versions_file)])
        assert code == ExitCodes.SUCCESS.value
        assert "<version>2.0</version>" in pom.read_text(encoding="utf-8")

    def test_dry_run(self, tmp_path):
        pom, versions_file = self.write_files(tmp_path, {"org.example:lib": ["2.0"]})
        code = self.run_main(["-f", str(pom), "--versions-file", str(versions_file), "--dry-run"])
        assert code == ExitCodes.SUCCESS.value
        assert pom.read_text(encoding="utf-8") == POM

    def test_missing_pom(self, tmp_path):
        _, versions_file = self.write_files(tmp_path, {})
        code = self.run_main(["-f", str(tmp_path / "nope.xml"), "--versions-file", str(versions_file)])
        assert code == ExitCodes.FILE_ERROR.value

    def test_bad_config(self, tmp_path):
        pom, versions_file = self.write_files(tmp_path, {})
        code = self.run_main(["-f", str(pom), "--versions-file", str(versions_file), "--qualifier-excludes", "("])
        assert code == ExitCodes.CONFIG_ERROR.value

    def test_version_range_keeps_snapshot(self, tmp_path):
        pom, versions_file = self.write_files(tmp_path, {"org.example:lib": ["2.0"]})
        code = self.run_main(["-f", str(pom), "--versions-file", str(versions_file), "--version-range", "[1.0,2.0)"])
        assert code == ExitCodes.SUCCESS.value
        assert pom.read_text(encoding="utf-8") == POM

    def test_bad_version_range(self, tmp_path):
        pom, versions_file = self.write_files(tmp_path, {})
        code = self.run_main(["-f", str(pom), "--versions-file", str(versions_file), "--version-range", "[3.0,1.0]"])
        assert code == ExitCodes.CONFIG_ERROR.value

    def test_bad_versions_file(self, tmp_path):
        pom, _ = self.write_files(tmp_path, {})
        broken = tmp_path / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        code = self.run_main(["-f", str(pom), "--versions-file", str(broken)])
        assert code == ExitCodes.CONFIG_ERROR.value

    def test_malformed_pom(self, tmp_path):
        pom, versions_file = self.write_files(tmp_path, {})
        pom.write_text("<project><dependencies></project>", encoding="utf-8")
        code = self.run_main(["-f", str(pom), "--versions-file", str(versions_file)])
        assert code == ExitCodes.STRUCTURE_ERROR.value

    def test_retrieval_error(self, tmp_path):
        pom = tmp_path / "pom.xml"
        pom.write_text(POM, encoding="utf-8")
        repo = tmp_path / "repo"
        artifact = repo / "org" / "example" / "lib"
        artifact.mkdir(parents=True)
        (artifact / "maven-metadata.xml").write_text("<metadata>", encoding="utf-8")
        code = self.run_main(["-f", str(pom), "--repository", str(repo)])
        assert code == ExitCodes.RETRIEVAL_ERROR.value
        assert pom.read_text(encoding="utf-8") == POM

    @patch("pomversions.configure_logging")
    def test_logging_configured_from_args(self, mock_configure, tmp_path):
        pom, versions_file = self.write_files(tmp_path, {})
        self.run_main(["-f", str(pom), "--versions-file", str(versions_file), "--loglevel", "DEBUG"])
        mock_configure.assert_called_once_with("DEBUG", None)
