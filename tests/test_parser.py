from __future__ import annotations

from pathlib import Path

import pytest

from pom_validator.exceptions import PomModelError, PomNotFoundError, PomParseError
from pom_validator.models import ProjectDescriptor
from pom_validator.parser import has_placeholder, parse_pom


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.write_text(content, encoding="utf-8")
    return path


def test_parse_pom_without_namespace(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <dependencies>
    <dependency>
      <groupId>org.slf4j</groupId>
      <artifactId>slf4j-api</artifactId>
      <version>2.0.12</version>
      <scope>compile</scope>
    </dependency>
  </dependencies>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    assert isinstance(model, ProjectDescriptor)
    assert model.path == path
    assert model.model_version == "4.0.0"
    assert model.gav.compact() == "com.acme:demo:1.0.0"
    assert model.packaging is None
    assert model.effective_packaging == "jar"
    assert len(model.dependencies) == 1
    dep = model.dependencies[0]
    assert dep.gav.compact() == "org.slf4j:slf4j-api:2.0.12"
    assert dep.scope == "compile"
    assert dep.managed is False


def test_parse_pom_with_namespace(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <dependencies>
    <dependency>
      <groupId>junit</groupId>
      <artifactId>junit</artifactId>
      <version>4.13.2</version>
      <scope>test</scope>
      <optional>false</optional>
    </dependency>
  </dependencies>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    assert model.gav.compact() == "com.acme:demo:1.0.0"
    dep = model.dependencies[0]
    assert dep.gav.compact() == "junit:junit:4.13.2"
    assert dep.scope == "test"


def test_placeholders_are_kept_verbatim(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project>
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>demo</artifactId>
  <version>1.0.0</version>

  <properties>
    <lib.version>2.3.4</lib.version>
  </properties>

  <dependencies>
    <dependency>
      <groupId>org.example</groupId>
      <artifactId>lib</artifactId>
      <version>${lib.version}</version>
    </dependency>
  </dependencies>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    assert model.dependencies[0].version == "${lib.version}"
    assert model.properties == {"lib.version": "2.3.4"}
    assert has_placeholder(model.dependencies[0].version)
    assert not has_placeholder("2.3.4")
    assert not has_placeholder(None)


def test_parent_section_is_not_merged_into_own_coordinates(tmp_path: Path) -> None:
    pom = """<?xml version=\"1.0\" encoding=\"UTF-8\"?>
<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>

  <parent>
    <groupId>com.acme</groupId>
    <artifactId>parent</artifactId>
    <version>9.9.9</version>
  </parent>

  <artifactId>child</artifactId>
</project>
"""
    path = _write(tmp_path, "pom.xml", pom)
    model = parse_pom(path)

    assert model.gav.group_id is None
    assert model.gav.version is None
    assert model.parent is not None
    assert model.parent.gav.compact() == "com.acme:parent:9.9.9"
    assert model.parent.relative_path is None
    assert model.effective_gav.compact() == "com.acme:child:9.9.9"


def test_empty_relative_path_differs_from_absent(tmp_path: Path) -> None:
    pom = """<project>
  <modelVersion>4.0.0</modelVersion>
  <parent>
    <groupId>org.springframework.boot</groupId>
    <artifactId>spring-boot-starter-parent</artifactId>
    <version>3.2.0</version>
    <relativePath/>
  </parent>
  <artifactId>app</artifactId>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))
    assert model.parent.relative_path == ""


def test_sections_and_declaration_indices(tmp_path: Path) -> None:
    pom = """<project xmlns=\"http://maven.apache.org/POM/4.0.0\">
  <modelVersion>4.0.0</modelVersion>
  <groupId>com.acme</groupId>
  <artifactId>parent</artifactId>
  <version>1.0.0</version>
  <packaging>pom</packaging>
  <modules>
    <module>core</module>
    <module>web</module>
  </modules>
  <properties>
    <empty.value></empty.value>
    <java.version>21</java.version>
  </properties>
  <dependencyManagement>
    <dependencies>
      <dependency>
        <groupId>a</groupId>
        <artifactId>x</artifactId>
        <version>1</version>
      </dependency>
      <!-- comment between entries -->
      <dependency>
        <groupId>b</groupId>
        <artifactId>y</artifactId>
        <version>2</version>
        <scope>import</scope>
      </dependency>
    </dependencies>
  </dependencyManagement>
  <build>
    <pluginManagement>
      <plugins>
        <plugin>
          <artifactId>maven-jar-plugin</artifactId>
          <version>3.3.0</version>
        </plugin>
      </plugins>
    </pluginManagement>
    <plugins>
      <plugin>
        <artifactId>maven-jar-plugin</artifactId>
      </plugin>
    </plugins>
  </build>
</project>
"""
    model = parse_pom(_write(tmp_path, "pom.xml", pom))

    assert model.modules == ["core", "web"]
    assert model.properties == {"java.version": "21"}
    assert [d.index for d in model.dependency_management] == [0, 1]
    assert all(d.managed for d in model.dependency_management)
    assert model.dependency_management[1].scope == "import"
    assert model.has_dependency_management
    assert model.has_build
    assert model.has_plugin_management
    assert model.plugin_management[0].key() == "org.apache.maven.plugins:maven-jar-plugin"
    assert model.plugins[0].version is None
    assert model.plugins[0].managed is False


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(PomNotFoundError):
        parse_pom(tmp_path / "missing.xml")


def test_directory_is_not_a_pom(tmp_path: Path) -> None:
    with pytest.raises(PomNotFoundError):
        parse_pom(tmp_path)


def test_malformed_xml_raises_parse_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<project><modelVersion>4.0.0</project>")
    with pytest.raises(PomParseError):
        parse_pom(path)


def test_non_project_root_raises_model_error(tmp_path: Path) -> None:
    path = _write(tmp_path, "pom.xml", "<settings><localRepository/></settings>")
    with pytest.raises(PomModelError):
        parse_pom(path)
