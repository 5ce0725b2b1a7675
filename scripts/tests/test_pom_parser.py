"""Tests for pom_parser.py — POM XML parsing."""

import xml.etree.ElementTree as ET

import pytest

from pomcli.pom_models import Parent, PomModel
from pomcli.pom_parser import (
    effective_group_id,
    effective_version,
    parse_pom,
    parse_pom_bytes,
)


class TestParsePom:
    def test_minimal_pom(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <groupId>com.example</groupId>
                <artifactId>demo</artifactId>
                <version>1.0.0</version>
            </project>
        """)
        model = parse_pom(pom)
        assert model.group_id == "com.example"
        assert model.artifact_id == "demo"
        assert model.version == "1.0.0"
        assert model.packaging == "jar"
        assert model.parent is None
        assert model.dependencies == []
        assert model.dep_management is None

    def test_namespaced_pom(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project xmlns="http://maven.apache.org/POM/4.0.0">
                <modelVersion>4.0.0</modelVersion>
                <groupId>com.example</groupId>
                <artifactId>ns-demo</artifactId>
                <version>2.0.0</version>
                <packaging>pom</packaging>
            </project>
        """)
        model = parse_pom(pom)
        assert model.artifact_id == "ns-demo"
        assert model.packaging == "pom"
        assert model.model_version == "4.0.0"

    def test_parent_with_default_relative_path(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <parent>
                    <groupId>com.example</groupId>
                    <artifactId>parent</artifactId>
                    <version>1.0.0</version>
                </parent>
                <artifactId>child</artifactId>
            </project>
        """)
        model = parse_pom(pom)
        assert model.parent == Parent("com.example", "parent", "1.0.0", "../pom.xml")
        assert model.group_id is None
        assert model.version is None

    def test_parent_with_explicit_relative_path(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <parent>
                    <groupId>com.example</groupId>
                    <artifactId>parent</artifactId>
                    <version>1.0.0</version>
                    <relativePath>../../build/parent</relativePath>
                </parent>
                <artifactId>child</artifactId>
            </project>
        """)
        assert parse_pom(pom).parent.relative_path == "../../build/parent"

    def test_parent_with_empty_relative_path(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <parent>
                    <groupId>org.springframework.boot</groupId>
                    <artifactId>spring-boot-starter-parent</artifactId>
                    <version>3.4.1</version>
                    <relativePath/>
                </parent>
                <artifactId>myapp</artifactId>
            </project>
        """)
        assert parse_pom(pom).parent.relative_path == ""

    def test_dependencies_parsed(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <groupId>com.example</groupId>
                <artifactId>demo</artifactId>
                <dependencies>
                    <dependency>
                        <groupId>org.springframework.boot</groupId>
                        <artifactId>spring-boot-starter-web</artifactId>
                    </dependency>
                    <dependency>
                        <groupId>org.junit.jupiter</groupId>
                        <artifactId>junit-jupiter</artifactId>
                        <version>5.11.0</version>
                        <classifier>tests</classifier>
                        <scope>test</scope>
                    </dependency>
                </dependencies>
            </project>
        """)
        model = parse_pom(pom)
        assert len(model.dependencies) == 2
        assert model.dependencies[0].group_id == "org.springframework.boot"
        assert model.dependencies[0].version is None
        assert model.dependencies[0].scope is None
        assert model.dependencies[1].scope == "test"
        assert model.dependencies[1].classifier == "tests"

    def test_dependency_with_exclusions(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <groupId>com.example</groupId>
                <artifactId>demo</artifactId>
                <dependencies>
                    <dependency>
                        <groupId>org.springframework.boot</groupId>
                        <artifactId>spring-boot-starter-web</artifactId>
                        <exclusions>
                            <exclusion>
                                <groupId>org.springframework.boot</groupId>
                                <artifactId>spring-boot-starter-tomcat</artifactId>
                            </exclusion>
                        </exclusions>
                    </dependency>
                </dependencies>
            </project>
        """)
        dep = parse_pom(pom).dependencies[0]
        assert dep.exclusions == [("org.springframework.boot", "spring-boot-starter-tomcat")]

    def test_optional_dependency(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <groupId>com.example</groupId>
                <artifactId>demo</artifactId>
                <dependencies>
                    <dependency>
                        <groupId>org.projectlombok</groupId>
                        <artifactId>lombok</artifactId>
                        <optional>true</optional>
                    </dependency>
                </dependencies>
            </project>
        """)
        assert parse_pom(pom).dependencies[0].optional is True

    def test_dependency_management_with_bom(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project xmlns="http://maven.apache.org/POM/4.0.0">
                <groupId>com.example</groupId>
                <artifactId>demo</artifactId>
                <dependencyManagement>
                    <dependencies>
                        <dependency>
                            <groupId>org.springframework.cloud</groupId>
                            <artifactId>spring-cloud-dependencies</artifactId>
                            <version>2024.0.0</version>
                            <type>pom</type>
                            <scope>import</scope>
                        </dependency>
                    </dependencies>
                </dependencyManagement>
            </project>
        """)
        model = parse_pom(pom)
        assert len(model.dep_management) == 1
        bom = model.dep_management[0]
        assert bom.dep_type == "pom"
        assert bom.scope == "import"

    def test_empty_dependency_management(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <project>
                <artifactId>demo</artifactId>
                <dependencyManagement>
                </dependencyManagement>
            </project>
        """)
        assert parse_pom(pom).dep_management == []

    def test_source_keeps_comments_and_prolog(self, tmp_pom):
        pom = tmp_pom("""\
            <?xml version="1.0" encoding="UTF-8"?>
            <!-- generated -->
            <project>
                <!-- coordinates -->
                <artifactId>demo</artifactId>
            </project>
        """)
        source = parse_pom(pom).source
        assert source.prolog == '<?xml version="1.0" encoding="UTF-8"?>\n<!-- generated -->\n'
        assert source.trailing_newline is True
        assert source.tree.getroot()[0].tag is ET.Comment

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            parse_pom(tmp_path / "pom.xml")

    def test_malformed_xml_raises(self):
        with pytest.raises(ET.ParseError):
            parse_pom_bytes(b"<project><artifactId>demo</project>")


class TestEffectiveCoordinates:
    def test_declared_values_win(self):
        model = PomModel(
            artifact_id="child", group_id="com.child", version="2.0",
            parent=Parent("com.example", "parent", "1.0"),
        )
        assert effective_group_id(model) == "com.child"
        assert effective_version(model) == "2.0"

    def test_inherited_from_parent(self):
        model = PomModel(artifact_id="child", parent=Parent("com.example", "parent", "1.0"))
        assert effective_group_id(model) == "com.example"
        assert effective_version(model) == "1.0"

    def test_no_parent(self):
        model = PomModel(artifact_id="orphan")
        assert effective_group_id(model) is None
        assert effective_version(model) is None
