from __future__ import annotations

from pathlib import Path

import pytest

from pom_validator.exceptions import RemediationError
from pom_validator.models import Coordinate
from pom_validator.parser import parse_pom
from pom_validator.writer import backup_path, create_backup, write_pom

POM = """<?xml version="1.0" encoding="UTF-8"?>
<!-- keep this header comment -->
<project xmlns="http://maven.apache.org/POM/4.0.0">
  <modelVersion>4.0.0</modelVersion>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <dependencies>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
    </dependency>
    <!-- duplicated below -->
    <dependency>
      <groupId>a</groupId>
      <artifactId>x</artifactId>
      <version>1</version>
    </dependency>
    <dependency>
      <groupId>a</groupId>
      <artifactId>x</artifactId>
      <version>2</version>
    </dependency>
  </dependencies>

  <build>
    <plugins>
      <plugin>
        <artifactId>maven-compiler-plugin</artifactId>
      </plugin>
    </plugins>
  </build>
</project>
"""


def _write(tmp_path: Path, content: str = POM) -> Path:
    path = tmp_path / "pom.xml"
    path.write_text(content, encoding="utf-8")
    return path


def test_nothing_to_write(tmp_path: Path) -> None:
    path = _write(tmp_path)
    before = path.read_bytes()
    assert write_pom(parse_pom(path)) is False
    assert path.read_bytes() == before


def test_minimal_edits_keep_comments_and_namespace(tmp_path: Path) -> None:
    path = _write(tmp_path)
    d = parse_pom(path)
    junit, first, _ = d.dependencies
    plugin = d.plugins[0]
    updated = d.model_copy(
        update={
            "gav": d.gav.model_copy(update={"group_id": "com.example"}),
            "properties": {"project.build.sourceEncoding": "UTF-8"},
            "dependencies": [junit.model_copy(update={"scope": "test"}), first],
            "plugins": [plugin.model_copy(update={"gav": plugin.gav.model_copy(update={"version": "3.11.0"})})],
        }
    )

    assert write_pom(updated) is True

    text = path.read_text(encoding="utf-8")
    assert text.startswith('<?xml version')
    assert "<!-- keep this header comment -->" in text
    assert "<!-- duplicated below -->" in text
    assert "ns0:" not in text
    assert text.index("<groupId>com.example</groupId>") < text.index("<artifactId>demo</artifactId>")
    assert "<scope>test</scope>" in text
    assert "<version>2</version>" not in text
    assert "<version>3.11.0</version>" in text

    reparsed = parse_pom(path)
    assert reparsed.gav == Coordinate(group_id="com.example", artifact_id="demo", version="1.0.0")
    assert reparsed.properties == {"project.build.sourceEncoding": "UTF-8"}
    assert [d.gav.compact() for d in reparsed.dependencies] == ["junit:junit:4.13.2", "a:x:1"]
    assert reparsed.dependencies[0].scope == "test"
    assert reparsed.plugins[0].version == "3.11.0"


def test_properties_are_added_to_existing_section(tmp_path: Path) -> None:
    content = POM.replace("  <dependencies>", "  <properties>\n    <java.version>17</java.version>\n  </properties>\n\n  <dependencies>", 1)
    path = _write(tmp_path, content)
    d = parse_pom(path)
    updated = d.model_copy(update={"properties": {**d.properties, "maven.compiler.source": "17"}})

    write_pom(updated)

    text = path.read_text(encoding="utf-8")
    assert text.count("<properties>") == 1
    assert parse_pom(path).properties == {"java.version": "17", "maven.compiler.source": "17"}


def test_file_changed_since_parse(tmp_path: Path) -> None:
    path = _write(tmp_path)
    stale = parse_pom(path)
    _write(tmp_path, POM.replace("<groupId>junit</groupId>", "<groupId>org.other</groupId>"))
    junit = stale.dependencies[0].model_copy(update={"scope": "test"})
    updated = stale.model_copy(update={"dependencies": [junit, *stale.dependencies[1:]]})

    with pytest.raises(RemediationError):
        write_pom(updated)


def test_backup_is_byte_identical(tmp_path: Path) -> None:
    path = _write(tmp_path)
    backup = create_backup(path)
    assert backup == backup_path(path) == tmp_path / "pom.xml.backup"
    assert backup.read_bytes() == path.read_bytes()


def test_backup_of_missing_file(tmp_path: Path) -> None:
    with pytest.raises(RemediationError):
        create_backup(tmp_path / "pom.xml")
