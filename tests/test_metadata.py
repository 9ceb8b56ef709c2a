"""test suite for the sharded metadata index."""
import json
import pytest
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from crateyard.domain.errors import MetadataParseError
from crateyard.domain.models import Dependency, SourceId
from crateyard.registry.metadata import MetadataIndex, encode_record, shard_path


SOURCE = SourceId(url="https://github.com/example/index")


def record(name, vers, cksum, deps=None, features=None):
    return json.dumps({
        "name": name,
        "vers": vers,
        "deps": deps or [],
        "features": features or {},
        "cksum": cksum,
    })


def write_shard(root: Path, name: str, lines):
    path = root / shard_path(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(lines) + "\n")
    return path


class TestShardPath:
    @pytest.mark.parametrize("name,expected", [
        ("a", "1/a"),
        ("ab", "2/ab"),
        ("abc", "3/a/abc"),
        ("abcd", "ab/cd/abcd"),
        ("sample", "sa/mp/sample"),
        ("serde_json", "se/rd/serde_json"),
    ])
    def test_shard_path(self, name, expected):
        assert shard_path(name) == Path(expected)

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            shard_path("")

    @pytest.mark.parametrize("name", ["../../etc/passwd", "a/b", "a\\b", "..", "....", "..xy", ".ab"])
    def test_names_that_would_leave_the_index_rejected(self, name):
        with pytest.raises(ValueError):
            shard_path(name)


class TestMetadataIndex:
    @pytest.fixture
    def index(self, temp_dir):
        return MetadataIndex(temp_dir, SOURCE)

    def test_missing_shard_is_empty(self, index):
        assert index.query(Dependency(name="never-published")) == []
        assert index.hashes == {}

    def test_parses_dependencies_and_features(self, index, temp_dir):
        deps = [{
            "name": "serde",
            "req": "^1.0",
            "features": ["derive"],
            "optional": True,
            "default_features": False,
            "target": "cfg(unix)",
        }]
        write_shard(temp_dir, "sample", [
            record("sample", "1.0.0", "aa", deps=deps, features={"default": ["serde"]}),
        ])

        [summary] = index.query(Dependency(name="sample"))
        assert summary.package_id.source_id == SOURCE
        assert summary.features == {"default": ["serde"]}
        [dep] = summary.dependencies
        assert dep.name == "serde"
        assert dep.specifier == "^1.0"
        assert dep.features == ["derive"]
        assert dep.optional is True
        assert dep.default_features is False
        assert dep.target == "cfg(unix)"

    def test_skips_blank_lines(self, index, temp_dir):
        write_shard(temp_dir, "sample", [
            "",
            record("sample", "1.0.0", "aa"),
            "   ",
            record("sample", "1.0.1", "bb"),
            "",
        ])
        summaries = index.query(Dependency(name="sample"))
        assert [s.version for s in summaries] == ["1.0.0", "1.0.1"]

    def test_populates_checksums(self, index, temp_dir):
        write_shard(temp_dir, "sample", [
            record("sample", "1.0.0", "H0"),
            record("sample", "1.0.1", "H1"),
        ])
        # checksums are recorded even for versions the requirement filters out
        index.query(Dependency(name="sample", specifier="=1.0.1"))
        assert index.checksum("sample", "1.0.0") == "H0"
        assert index.checksum("sample", "1.0.1") == "H1"
        assert index.checksum("sample", "9.9.9") is None

    def test_malformed_line_fails_whole_query(self, index, temp_dir):
        write_shard(temp_dir, "sample", [
            record("sample", "1.0.0", "H0"),
            "{not json",
            record("sample", "1.0.1", "H1"),
        ])
        with pytest.raises(MetadataParseError) as exc_info:
            index.query(Dependency(name="sample"))
        assert exc_info.value.dependency == "sample"
        assert "sample" in str(exc_info.value)
        assert exc_info.value.line_number == 2
        assert exc_info.value.__cause__ is not None
        assert index.hashes == {}

    def test_missing_field_is_malformed(self, index, temp_dir):
        write_shard(temp_dir, "sample", ['{"name": "sample", "vers": "1.0.0"}'])
        with pytest.raises(MetadataParseError):
            index.query(Dependency(name="sample"))

    def test_unreadable_shard_is_empty(self, index, temp_dir):
        (temp_dir / shard_path("sample")).mkdir(parents=True)
        assert index.query(Dependency(name="sample")) == []

    def test_query_for_unsafe_name_is_empty(self, index, temp_dir):
        assert index.query(Dependency(name="../passwd")) == []

    @pytest.mark.parametrize("name,vers", [
        ("../../victim", "1.0.0"),
        ("sample", "1/../../../victim"),
        ("sample", ".."),
        ("sam\\ple", "1.0.0"),
    ])
    def test_path_like_fields_are_malformed(self, index, temp_dir, name, vers):
        write_shard(temp_dir, "sample", [
            record("sample", "1.0.0", "H0"),
            record(name, vers, "H1"),
        ])
        with pytest.raises(MetadataParseError) as exc_info:
            index.query(Dependency(name="sample"))
        assert exc_info.value.line_number == 2
        assert index.hashes == {}

    def test_requirement_filtering(self, index, temp_dir):
        write_shard(temp_dir, "sample", [
            record("sample", "0.9.0", "a"),
            record("sample", "1.0.0", "b"),
            record("sample", "1.1.0", "c"),
        ])
        summaries = index.query(Dependency(name="sample", specifier="~1.0"))
        assert [s.version for s in summaries] == ["1.0.0"]


class TestEncodeRecord:
    def test_round_trip(self, temp_dir):
        index = MetadataIndex(temp_dir, SOURCE)
        deps = [{
            "name": "log",
            "req": ">=0.4, <0.5",
            "features": [],
            "optional": False,
            "default_features": True,
            "target": None,
        }]
        write_shard(temp_dir, "sample", [
            record("sample", "1.0.0", "H0", deps=deps, features={"std": [], "default": ["std"]}),
        ])
        [original] = index.summaries("sample")

        line = encode_record(original, "H0")
        write_shard(temp_dir, "sample", [line])
        [decoded] = MetadataIndex(temp_dir, SOURCE).summaries("sample")

        assert decoded.package_id == original.package_id
        assert decoded.dependencies == original.dependencies
        assert decoded.features == original.features
        assert json.loads(line)["cksum"] == "H0"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
